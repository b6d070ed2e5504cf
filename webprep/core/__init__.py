"""Core conversion pipeline."""

from webprep.core.classifier import Classification, Classifier, EntryKind
from webprep.core.converter import DirectoryConverter, convert_directory
from webprep.core.info import get_file_info, parse_file_info
from webprep.core.models import (
    AnimationGroup,
    ConversionReport,
    FileInfo,
    FileRecord,
    FileStat,
    Orientation,
    SourceEntry,
)
from webprep.core.responsive import ConversionPlan, ResizeQuery, build_plan

__all__ = [
    "AnimationGroup",
    "Classification",
    "Classifier",
    "ConversionPlan",
    "ConversionReport",
    "DirectoryConverter",
    "EntryKind",
    "FileInfo",
    "FileRecord",
    "FileStat",
    "Orientation",
    "ResizeQuery",
    "SourceEntry",
    "build_plan",
    "convert_directory",
    "get_file_info",
    "parse_file_info",
]
