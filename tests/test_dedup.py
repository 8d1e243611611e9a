import polars as pl

from marketing_cleaner.cleaning.dedup import ROW_NR, select_survivors


def test_keeps_highest_ranked_row_per_key():
    df = pl.DataFrame({"k": ["a", "a", "b"], "v": [1, 3, 2]})
    out = select_survivors(df, ["k"], [(pl.col("v"), True)])
    assert out.select("k", "v").to_dicts() == [{"k": "a", "v": 3}, {"k": "b", "v": 2}]
    assert ROW_NR in out.columns


def test_ties_go_to_earliest_row():
    df = pl.DataFrame({"k": ["a", "a"], "v": [5, 5], "tag": ["first", "second"]})
    out = select_survivors(df, ["k"], [(pl.col("v"), True)])
    assert out["tag"].to_list() == ["first"]


def test_nulls_rank_last():
    df = pl.DataFrame({"k": ["a", "a"], "v": [None, 1]})
    out = select_survivors(df, ["k"], [(pl.col("v"), True)])
    assert out["v"].to_list() == [1]


def test_priority_order_of_ranking():
    df = pl.DataFrame(
        {
            "k": ["a", "a", "a"],
            "has_age": [False, True, True],
            "score": [9, 1, 2],
        }
    )
    out = select_survivors(df, ["k"], [(pl.col("has_age"), True), (pl.col("score"), True)])
    assert out.select("has_age", "score").to_dicts() == [{"has_age": True, "score": 2}]


def test_losers_are_not_merged():
    df = pl.DataFrame({"k": ["a", "a"], "v": [1, 2], "state": ["CA", None]})
    out = select_survivors(df, ["k"], [(pl.col("v"), True)])
    assert out.select("v", "state").to_dicts() == [{"v": 2, "state": None}]


def test_empty_frame():
    df = pl.DataFrame({"k": [], "v": []}, schema={"k": pl.Utf8, "v": pl.Int64})
    assert select_survivors(df, ["k"], [(pl.col("v"), True)]).is_empty()
