from app.analysis.analyzer import Analyzer
from app.analysis.factory import AnalyzerFactory
from app.analysis.prompt_composer import compose

__all__ = ["Analyzer", "AnalyzerFactory", "compose"]
