# Core Package
from core.novel import Novel, NovelStatus, ListStatus, ContentAmount, ChapterRead
from core.library import NovelLibrary, ReadHistory
from core.novel_matcher import NovelMatcher, MatchResult, MatchTier
from core.numeric_extractor import NumericExtractor, RecognitionData
from core.recognition_logger import RecognitionLogger
from core.recognition_orchestrator import RecognitionOrchestrator, CurrentlyReadingSnapshot
from core.recognition_state import RecognitionStateMachine, CurrentlyReading, TitleObservation

__all__ = [
    'Novel',
    'NovelStatus',
    'ListStatus',
    'ContentAmount',
    'ChapterRead',
    'NovelLibrary',
    'ReadHistory',
    'NovelMatcher',
    'MatchResult',
    'MatchTier',
    'NumericExtractor',
    'RecognitionData',
    'RecognitionLogger',
    'RecognitionOrchestrator',
    'CurrentlyReadingSnapshot',
    'RecognitionStateMachine',
    'CurrentlyReading',
    'TitleObservation',
]
