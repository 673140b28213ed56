from radio.eval.metrics.error import mae, rmse
from radio.eval.metrics.ndcg import ndcg_at_k
from radio.eval.metrics.precision import precision_at_k
from radio.eval.metrics.recall import recall_at_k

__all__ = ["mae", "rmse", "ndcg_at_k", "precision_at_k", "recall_at_k"]
