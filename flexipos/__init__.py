"""
flexipos: part-of-speech tagging stage for tokenized documents.

Sends each sentence to a pluggable statistical tagger, optionally maps the
tagger's fine tags onto a coarser tagset, and never overwrites existing tags.
"""

__version__ = "1.0.0"

from flexipos.config import TaggerConfig, build_tagger
from flexipos.doc import Document, Sentence, Token
from flexipos.errors import AlignmentError, ConfigurationError, FlexiposError, UnresolvedMappingWarning
from flexipos.tag_mapping import MappingStatus, TagMapper, TagResolution
from flexipos.tagger import SentenceTagger, SerializedTagger, TaggingResult

__all__ = [
    'AlignmentError',
    'ConfigurationError',
    'Document',
    'FlexiposError',
    'MappingStatus',
    'Sentence',
    'SentenceTagger',
    'SerializedTagger',
    'TagMapper',
    'TagResolution',
    'TaggerConfig',
    'TaggingResult',
    'Token',
    'UnresolvedMappingWarning',
    'build_tagger',
    '__version__',
]
