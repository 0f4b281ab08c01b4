"""Dataclasses and enums for the review pipeline. No logic beyond small helpers."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


def new_id() -> str:
    return str(uuid.uuid4())


class IssueType(str, Enum):
    BUG = "bug"
    OPTIMIZATION = "optimization"
    STYLE = "style"
    SECURITY = "security"
    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(str, Enum):
    SECURITY = "security"
    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"
    STYLE = "style"
    BUGS = "bugs"


class Dimension(str, Enum):
    """One analysis axis, run as an independent task."""

    CODE_QUALITY = "code_quality"
    SECURITY = "security"
    PERFORMANCE = "performance"
    STYLE = "style"


class ArgumentType(str, Enum):
    PRO = "pro"
    CON = "con"
    NEUTRAL = "neutral"

    def opposite(self) -> "ArgumentType":
        return ArgumentType.CON if self is ArgumentType.PRO else ArgumentType.PRO


class ArgumentSource(str, Enum):
    AI = "ai"
    USER = "user"


class DebateStatus(str, Enum):
    ACTIVE = "active"
    CONCLUDED = "concluded"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class CodeSnippet:
    id: str
    content: str
    language: str
    filename: str | None = None
    size: int = 0
    uploaded_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class CodeIssue:
    type: IssueType
    severity: Severity
    line: int
    column: int
    message: str
    suggested_fix: str | None = None


@dataclass(frozen=True)
class CodeMetrics:
    complexity: float        # 0-100, higher is simpler
    maintainability: float   # 0-100
    readability: float       # 0-100


@dataclass
class IssueCategories:
    security: list[CodeIssue] = field(default_factory=list)
    performance: list[CodeIssue] = field(default_factory=list)
    maintainability: list[CodeIssue] = field(default_factory=list)
    style: list[CodeIssue] = field(default_factory=list)
    bugs: list[CodeIssue] = field(default_factory=list)

    def bucket(self, category: Category) -> list[CodeIssue]:
        return getattr(self, category.value)

    def items(self) -> list[tuple[Category, list[CodeIssue]]]:
        return [(c, self.bucket(c)) for c in Category]

    def total(self) -> int:
        return sum(len(issues) for _, issues in self.items())


@dataclass
class AISuggestion:
    type: IssueType
    severity: Severity
    line_start: int
    line_end: int
    title: str
    description: str
    confidence: float        # always within [0.1, 1.0]
    suggested_fix: str | None = None
    session_id: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class AnalysisResult:
    code_snippet_id: str
    language: str
    issues: list[CodeIssue]
    metrics: CodeMetrics
    suggestions: list[str]


@dataclass
class EnhancedAnalysisResult(AnalysisResult):
    categories: IssueCategories = field(default_factory=IssueCategories)
    prioritized_suggestions: list[AISuggestion] = field(default_factory=list)
    confidence: float = 0.0          # within [0, 1]
    processing_time: float = 0.0     # milliseconds


@dataclass(frozen=True)
class CodeChange:
    line_start: int
    line_end: int
    original_code: str
    proposed_code: str
    reason: str
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class DebateContext:
    """Turn-by-turn context of a debate. Only ever extended, never rewritten."""

    code_change: CodeChange
    previous_arguments: list[str] = field(default_factory=list)
    user_responses: list[str] = field(default_factory=list)
    debate_id: str | None = None

    def extended(self, reply: str, user_input: str) -> "DebateContext":
        return replace(
            self,
            previous_arguments=[*self.previous_arguments, reply],
            user_responses=[*self.user_responses, user_input],
        )


@dataclass
class DebateArguments:
    arguments: list[str]
    counter_arguments: list[str]
    context: DebateContext


@dataclass
class DebateResponse:
    response: str
    follow_up_questions: list[str]
    context: DebateContext


@dataclass
class DebateArgument:
    content: str
    type: ArgumentType
    confidence: float
    source: ArgumentSource
    evidence: list[str] = field(default_factory=list)
    user_id: str | None = None
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class DebateConclusion:
    summary: str
    recommendation: str
    confidence: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class DebateSession:
    topic: str
    code_context: str
    session_id: str = ""
    code_snippet_id: str = ""
    code_change_id: str | None = None
    arguments: list[DebateArgument] = field(default_factory=list)
    status: DebateStatus = DebateStatus.ACTIVE
    conclusion: DebateConclusion | None = None
    participants: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    expires_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is DebateStatus.ACTIVE


@dataclass
class DebateAnalytics:
    total_debates: int
    active_debates: int
    concluded_debates: int
    average_arguments_per_debate: float
    most_active_participants: list[tuple[str, int]]


@dataclass
class SessionRecord:
    id: str
    suggestions: list[AISuggestion] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationParams:
    max_tokens: int = 500
    temperature: float = 0.3


@dataclass
class ModelResponse:
    provider: str
    model: str
    content: str
    latency_sec: float
    token_count: int | None
