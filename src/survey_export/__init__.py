"""
Survey Response Export Package

Turns a survey snapshot (questions + collected responses) into a single
analytical CSV artifact.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Authentication or authorization
    - Plan / ticket entitlements
    - Persistence or file storage
    - HTTP request handling

Those concerns are injected at the boundary (see survey_export.service).

Every stage of the pipeline is a pure function of its inputs:
    encoding -> numeric -> normalizer -> table -> csv_writer
"""

__version__ = "0.1.0"
