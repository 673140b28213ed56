"""Offline evaluation and one-off suggestions for the streaming-radio recommender.

Usage examples
--------------
Evaluate the Pearson predictor against the mean-rating baseline:
    python -m radio.main --ratings ratings.csv --model pearson --k 10
    python -m radio.main --ratings ratings.csv --model mean --test-fraction 0.25

Suggest songs for one user from the full ratings file:
    python -m radio.main --ratings ratings.csv --user 42 --k 5
"""

from __future__ import annotations

import argparse
import logging

from radio.config import RadioConfig
from radio.dataframes import load_ratings, temporal_split
from radio.eval.eval import evaluate
from radio.matrix import RatingMatrix
from radio.models import MeanRatingPredictor, PearsonPredictor, Suggester

logger = logging.getLogger(__name__)

MODELS = {
    "pearson": PearsonPredictor,
    "mean": MeanRatingPredictor,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate rating predictors or suggest songs for a user.",
    )

    parser.add_argument(
        "--ratings",
        type=str,
        required=True,
        help="CSV file with UserID,SongID,Rating[,Timestamp] columns.",
    )
    parser.add_argument(
        "--model",
        type=str,
        default="pearson",
        choices=sorted(MODELS),
        help="Rating predictor: user-based Pearson CF or per-song mean baseline.",
    )
    parser.add_argument(
        "--user",
        type=int,
        default=None,
        help="Print the top-k suggestions for this user instead of evaluating.",
    )
    parser.add_argument(
        "--k",
        type=int,
        default=10,
        help="Top-k cutoff for ranking metrics and suggestions.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=4.0,
        help="Relevance threshold for precision/recall.",
    )
    parser.add_argument(
        "--test-fraction",
        type=float,
        default=0.2,
        help="Share of each user's latest ratings held out for evaluation.",
    )
    parser.add_argument(
        "--max-candidates",
        type=int,
        default=None,
        help="Cap on candidate songs scored per user (lowest ids first).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = RadioConfig.from_args(args)
    predictor = MODELS[args.model](config)

    logger.info("Loading ratings from %s...", args.ratings)
    ratings = load_ratings(args.ratings)
    logger.info(
        "Loaded %d ratings from %d users on %d songs",
        len(ratings),
        ratings["UserID"].nunique(),
        ratings["SongID"].nunique(),
    )

    if args.user is not None:
        predictor.fit(RatingMatrix.from_frame(ratings))
        suggester = Suggester(predictor, config)
        ranked = suggester.recommend(args.user, ratings["SongID"].unique(), k=args.k)
        logger.info("Top %d suggestions for user %d:", len(ranked), args.user)
        for rank, scored in enumerate(ranked, start=1):
            logger.info("%2d. song %d (predicted %d)", rank, scored.song_id, int(scored.score))
        return

    train, test = temporal_split(ratings, test_fraction=args.test_fraction)
    logger.info("Fitting %s on %d train ratings...", predictor.__class__.__name__, len(train))
    metrics = evaluate(
        predictor=predictor,
        train_ratings=train,
        test_ratings=test,
        k=args.k,
        threshold=args.threshold,
        progress=True,
    )

    logger.info("=== Evaluation ===")
    logger.info("Model: %s", predictor.__class__.__name__)
    logger.info("Users: %d (skipped %d)", metrics.n_users, metrics.n_skipped)
    logger.info("RMSE:         %.5f", metrics.rmse)
    logger.info("MAE:          %.5f", metrics.mae)
    logger.info("NDCG@%d:      %.5f", args.k, metrics.ndcg)
    logger.info("Precision@%d: %.5f", args.k, metrics.precision)
    logger.info("Recall@%d:    %.5f", args.k, metrics.recall)


if __name__ == "__main__":
    main()
