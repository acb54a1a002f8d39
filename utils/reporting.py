"""
Tabular views of pricing results for reports and console output.
"""

import pandas as pd

from models.pricing import ABTestResult, PriceAnalysis, PricingRecommendation

ANALYSIS_COLUMNS = ["product_id", "current_price", "optimal_price", "price_difference"]


def analysis_frame(rows: list[PriceAnalysis]) -> pd.DataFrame:
    """One row per product, keeping the analysis order, plus a percent column."""
    df = pd.DataFrame(rows, columns=ANALYSIS_COLUMNS)
    current = df["current_price"].where(df["current_price"] != 0)
    df["percentage_change"] = (df["price_difference"] / current * 100).fillna(0.0).round(2)
    return df


def strategy_frame(recommendation: PricingRecommendation) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {"strategy": s.name, "price": s.price, "weight": s.weight, "reason": s.reason}
            for s in recommendation.strategies
        ],
        columns=["strategy", "price", "weight", "reason"],
    )
    df["contribution"] = df["price"] * df["weight"]
    return df


def ab_test_frame(result: ABTestResult) -> pd.DataFrame:
    """Variants A and B as rows, flagged with the winner."""
    df = pd.DataFrame(
        [vars(result.variant_a), vars(result.variant_b)], index=pd.Index(["A", "B"], name="variant")
    )
    df["winner"] = df.index == result.winner
    return df


def summarize_analysis(rows: list[PriceAnalysis]) -> dict[str, float]:
    df = analysis_frame(rows)
    if df.empty:
        return {"products": 0, "increases": 0, "decreases": 0, "mean_abs_change": 0.0}
    return {
        "products": int(len(df)),
        "increases": int((df["price_difference"] > 0).sum()),
        "decreases": int((df["price_difference"] < 0).sum()),
        "mean_abs_change": float(df["price_difference"].abs().mean()),
    }
