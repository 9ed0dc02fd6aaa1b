from .classifier import AttributeClassifier, classify_rows
from .detail import DetailExtractor
from .images import ImageArchiver
from .listing import PaginationResolver

__all__ = ["AttributeClassifier", "DetailExtractor", "ImageArchiver", "PaginationResolver", "classify_rows"]
