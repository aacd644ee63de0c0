from radiology_ai.predictions.models import PredictionSet
from radiology_ai.predictions.ranking import (
    TABLE_PAGE_SIZE,
    can_expand,
    rank,
    top_label,
    visible_rows,
)

# --- Tests for rank ---

def test_rank_descending_by_mean(abc_set):
    ranked = rank(abc_set)
    
    assert [entry.label for entry in ranked] == ["A", "C", "B"]
    assert [entry.mean for entry in ranked] == [0.9, 0.6, 0.3]
    assert [entry.rank for entry in ranked] == [0, 1, 2]

def test_rank_carries_variance(make_set):
    ranked = rank(make_set({"A": 0.2, "B": 0.8}, variances={"A": 0.01, "B": 0.07}))
    
    assert ranked[0].label == "B"
    assert ranked[0].variance == 0.07

def test_rank_ties_keep_api_order(make_set):
    ranked = rank(make_set({"X": 0.5, "Y": 0.7, "Z": 0.5, "W": 0.5}))
    
    assert [entry.label for entry in ranked] == ["Y", "X", "Z", "W"]

def test_rank_is_deterministic(ten_set):
    assert rank(ten_set) == rank(ten_set)

def test_rank_empty_set():
    assert rank(PredictionSet.empty()) == ()
    assert top_label(()) is None

def test_top_label(abc_set):
    assert top_label(rank(abc_set)) == "A"

# --- Tests for table slicing ---

def test_collapsed_table_shows_first_page(ten_set):
    ranked = rank(ten_set)
    rows = visible_rows(ranked, expanded=False)
    
    assert TABLE_PAGE_SIZE == 7
    assert len(rows) == 7
    assert rows == ranked[:7]

def test_expanded_table_shows_everything(ten_set):
    ranked = rank(ten_set)
    
    assert len(visible_rows(ranked, expanded=True)) == 10

def test_small_set_is_not_truncated(abc_set):
    ranked = rank(abc_set)
    
    assert len(visible_rows(ranked, expanded=False)) == 3
    assert not can_expand(ranked)

def test_can_expand_only_past_page_size(make_set, ten_set):
    seven = rank(make_set({f"L{i}": i / 10 for i in range(7)}))
    
    assert not can_expand(seven)
    assert can_expand(rank(ten_set))
    assert can_expand(seven, page_size=3)

def test_custom_page_size(ten_set):
    assert len(visible_rows(rank(ten_set), expanded=False, page_size=4)) == 4
