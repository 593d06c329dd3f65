from .matching import matches
from .scoring import score, normalize_phrases
from .prompts import build_grading_prompt
from .parsing import ParseFailure, parse_model_response
from .evaluator import AnswerEvaluator

__all__ = [
	"matches",
	"score",
	"normalize_phrases",
	"build_grading_prompt",
	"ParseFailure",
	"parse_model_response",
	"AnswerEvaluator",
]
