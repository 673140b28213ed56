from radio.models.base import RatingPredictor, ScoredSong
from radio.models.baseline import MeanRatingPredictor
from radio.models.predictor import PearsonPredictor
from radio.models.similarity import (
    UNDEFINED,
    Defined,
    Similarity,
    SimilarityEngine,
    SimilarityRow,
    Undefined,
    pearson,
)
from radio.models.suggester import Suggester, top_k_from_scores

__all__ = [
    "RatingPredictor",
    "ScoredSong",
    "MeanRatingPredictor",
    "PearsonPredictor",
    "UNDEFINED",
    "Defined",
    "Similarity",
    "SimilarityEngine",
    "SimilarityRow",
    "Undefined",
    "pearson",
    "Suggester",
    "top_k_from_scores",
]
