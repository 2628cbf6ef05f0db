"""Schema package exports."""

from .cases import (Case, CaseDocument, CaseEmbedding, IndexingReport,
                    SimilarCase, VectorMatch)
from .feedback import (FeedbackCreate, FeedbackDocument, FeedbackRecord,
                       StructuredFeedback)
from .usage import DailyQuotaDocument, QuotaStatus
