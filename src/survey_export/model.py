"""
Core Export Model Objects

Defines the data structures shared by every stage of the export pipeline.

These are pure data classes representing:
    - Questions (schema)
    - Responses (collected answers)
    - Surveys (snapshot handed over by the loader)
    - Column plans (derived, per export)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about persistence or HTTP
        - Are never mutated by the pipeline
        - Are rebuilt for every export request
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict

from survey_export.errors import UnsupportedFormatError


class QuestionKind(Enum):
    """
    Question types a survey author can create.

    Values match the persisted type names so loader payloads map directly.
    """

    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    NUMBER = "NUMBER"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    DATE = "DATE"
    RADIO = "RADIO"            # single choice
    CHECKBOX = "CHECKBOX"      # multiple choice
    SELECT = "SELECT"          # dropdown
    RATING = "RATING"
    PREFECTURE = "PREFECTURE"  # subdivision picker
    NAME = "NAME"
    AGE_GROUP = "AGE_GROUP"    # age bracket


PERSONAL_DATA_KINDS = frozenset({QuestionKind.NAME, QuestionKind.EMAIL, QuestionKind.PHONE})


class ExportFormat(Enum):
    """
    Analytical encodings an export can be produced in.

    RAW:          answer text verbatim
    NORMALIZED:   categorical codes min-max scaled to [0, 1]
    STANDARDIZED: categorical codes z-score scaled
    ONEHOT:       every categorical question expanded to binary columns
    """

    RAW = "raw"
    NORMALIZED = "normalized"
    STANDARDIZED = "standardized"
    ONEHOT = "onehot"

    @classmethod
    def parse(cls, value: "str | ExportFormat") -> "ExportFormat":
        """
        Coerce a request value into an ExportFormat.

        Raises:
            UnsupportedFormatError: If the value names no known format
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported export format: {value!r}") from None

    @property
    def is_scaled(self) -> bool:
        return self in (ExportFormat.NORMALIZED, ExportFormat.STANDARDIZED)


class ColumnKind(Enum):
    """How a single question is rendered into output columns."""

    TEXT = "text"
    NUMERIC_ORDINAL = "numeric_ordinal"
    ONE_HOT = "one_hot"


@dataclass
class QuestionSettings:
    """
    Per-question analysis settings.

    Properties:
        ordinal_structure:
            True when the options of a choice question have a meaningful
            rank order, so the question collapses to a single numeric
            column instead of one-hot columns.
    """

    ordinal_structure: bool = False


@dataclass
class QuestionSpec:
    """
    A single survey question as supplied by the schema loader.

    Properties:
        id:
            Stable question identifier (answers reference it)

        title:
            Question text; used as the base of its column labels

        kind:
            QuestionKind

        options:
            Ordered option labels, or None for kinds without options.
            Already parsed: the pipeline never re-reads serialized blobs.

        settings:
            QuestionSettings

        order:
            Display / column order, assigned at creation
    """

    id: str
    title: str
    kind: QuestionKind
    options: Optional[List[str]] = None
    settings: QuestionSettings = field(default_factory=QuestionSettings)
    order: int = 0

    @property
    def is_personal_data(self) -> bool:
        return self.kind in PERSONAL_DATA_KINDS


@dataclass
class ResponseRecord:
    """
    One submitted response.

    Properties:
        id: Response identifier
        created_at: Submission instant (naive values are taken as UTC)
        answers: question id -> answer text. Multi-choice answers are the
            selected option labels joined by commas.
    """

    id: str
    created_at: datetime
    answers: Dict[str, str] = field(default_factory=dict)


@dataclass
class SurveySnapshot:
    """
    Everything the loader hands over for one export.

    INVARIANTS:
        - questions are sorted by QuestionSpec.order (stable)
        - the pipeline treats the snapshot as read-only
    """

    id: str
    title: str
    questions: List[QuestionSpec] = field(default_factory=list)
    responses: List[ResponseRecord] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[QuestionSpec]:
        """
        Retrieve a question by ID.

        Returns:
            QuestionSpec or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def ordered_questions(self) -> List[QuestionSpec]:
        return sorted(self.questions, key=lambda q: q.order)


@dataclass
class RedactionPolicy:
    """Controls whether NAME / EMAIL / PHONE questions are exported."""

    include_personal_data: bool = False

    def excludes(self, question: QuestionSpec) -> bool:
        return not self.include_personal_data and question.is_personal_data


@dataclass
class HeaderOptions:
    """
    Header customization for one export.

    Properties:
        response_id_label / responded_at_label:
            Override the two leading column labels
        variable_names:
            question id -> label replacing the question title
        convert_to_english:
            Translate default labels to English identifiers
    """

    response_id_label: Optional[str] = None
    responded_at_label: Optional[str] = None
    variable_names: Dict[str, str] = field(default_factory=dict)
    convert_to_english: bool = False


@dataclass
class ColumnSpec:
    """
    A single output column.

    Properties:
        label: Header text
        kind: ColumnKind of the owning question
        option: Option label for one-hot columns, None otherwise
    """

    label: str
    kind: ColumnKind
    option: Optional[str] = None


@dataclass
class PlannedQuestion:
    """A question together with the columns it expands into."""

    question: QuestionSpec
    kind: ColumnKind
    columns: List[ColumnSpec] = field(default_factory=list)
    options: List[str] = field(default_factory=list)


@dataclass
class ColumnPlan:
    """
    Column layout computed once per export and applied to every row.

    INVARIANTS:
        - entries follow question order
        - one-hot columns of a question are consecutive, in option order
    """

    format: ExportFormat
    leading_labels: List[str] = field(default_factory=list)
    entries: List[PlannedQuestion] = field(default_factory=list)

    @property
    def header(self) -> List[str]:
        labels = list(self.leading_labels)
        for entry in self.entries:
            labels.extend(col.label for col in entry.columns)
        return labels

    @property
    def width(self) -> int:
        return len(self.leading_labels) + sum(len(e.columns) for e in self.entries)


@dataclass
class Table:
    """Header plus rows of already rendered (unescaped) cell strings."""

    header: List[str]
    rows: List[List[str]] = field(default_factory=list)
