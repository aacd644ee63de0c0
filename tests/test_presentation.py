import pytest

from radiology_ai.predictions.models import PredictionSet
from radiology_ai.predictions.presentation import (
    ErrorView,
    LoadingView,
    ResultView,
    as_percent,
    build_radar,
    render,
    render_error,
    render_loading,
)
from radiology_ai.predictions.ranking import rank
from radiology_ai.predictions.scroll import ScrollState
from radiology_ai.predictions.selection import SelectionState
from radiology_ai.predictions.severity import SeverityThresholds, Tier
from radiology_ai.utils.exceptions import FetchFailed, InvalidPredictionSet

def loaded(prediction_set):
    selection = SelectionState()
    selection.load(prediction_set)
    return selection

def test_rows_ranked_with_tiers(abc_set):
    view = render(abc_set, rank(abc_set), loaded(abc_set), ScrollState())
    
    assert isinstance(view, ResultView)
    assert [row.label for row in view.rows] == ["A", "C", "B"]
    # 0.6 / 0.9 is 66.7% of the maximum
    assert [row.tier for row in view.rows] == [Tier.SEVERE, Tier.SEVERE, Tier.MODERATE]
    assert [row.color for row in view.rows] == ["red", "red", "orange"]

def test_active_row_and_heatmap_share_label(abc_set):
    selection = loaded(abc_set)
    selection.select("C")
    
    view = render(abc_set, rank(abc_set), selection, ScrollState())
    
    assert [row.label for row in view.rows if row.active] == ["C"]
    assert view.heatmap.label == "C"
    assert view.heatmap.image == "heatmap-C"

def test_default_heatmap_is_top_ranked(abc_set):
    view = render(abc_set, rank(abc_set), loaded(abc_set), ScrollState())
    
    assert view.heatmap.label == "A"

def test_collapsed_table_but_full_radar(ten_set):
    selection = loaded(ten_set)
    ranked = rank(ten_set)
    
    view = render(ten_set, ranked, selection, ScrollState())
    assert len(view.rows) == 7
    assert len(view.radar.labels) == 10
    assert view.can_expand is True
    assert view.expanded is False
    assert view.total_classes == 10
    
    selection.toggle_expanded()
    view = render(ten_set, ranked, selection, ScrollState())
    assert len(view.rows) == 10
    assert len(view.radar.values) == 10
    assert view.expanded is True

def test_radar_follows_ranked_order(abc_set):
    radar = build_radar(rank(abc_set))
    
    assert radar.labels == ("A", "C", "B")
    assert radar.values == (0.9, 0.6, 0.3)

def test_verified_flag_on_rows(abc_set):
    selection = loaded(abc_set)
    selection.toggle_verified("B")
    
    view = render(abc_set, rank(abc_set), selection, ScrollState())
    
    assert {row.label: row.verified for row in view.rows} == {"A": False, "C": False, "B": True}

def test_scroll_flags(abc_set):
    selection = loaded(abc_set)
    
    top = render(abc_set, rank(abc_set), selection, ScrollState(at_bottom=False))
    bottom = render(abc_set, rank(abc_set), selection, ScrollState(at_bottom=True))
    
    assert (top.show_up_arrow, top.show_down_arrow) == (False, True)
    assert (bottom.show_up_arrow, bottom.show_down_arrow) == (True, False)

def test_accuracy_text(make_set):
    prediction_set = make_set({"A": 0.9}, variances={"A": 0.05})
    
    view = render(prediction_set, rank(prediction_set), loaded(prediction_set), ScrollState())
    
    assert view.rows[0].accuracy_text == "90%(5%)"

def test_as_percent_rounds_half_up():
    assert as_percent(0.125) == 13
    assert as_percent(0.0) == 0
    assert as_percent(1.0) == 100

def test_custom_page_size_and_thresholds(ten_set):
    view = render(
        ten_set, rank(ten_set), loaded(ten_set), ScrollState(),
        page_size=3, thresholds=SeverityThresholds(moderate_pct=10.0, severe_pct=20.0),
    )
    
    assert len(view.rows) == 3
    assert all(row.tier is Tier.SEVERE for row in view.rows)

def test_empty_set_renders_empty_view():
    empty = PredictionSet.empty()
    
    view = render(empty, rank(empty), loaded(empty), ScrollState())
    
    assert view.is_empty
    assert view.rows == ()
    assert view.heatmap is None
    assert view.radar.labels == ()
    assert view.can_expand is False

def test_zero_means_all_mild(make_set):
    prediction_set = make_set({"A": 0.0, "B": 0.0})
    
    view = render(prediction_set, rank(prediction_set), loaded(prediction_set), ScrollState())
    
    assert {row.tier for row in view.rows} == {Tier.MILD}

def test_legend_matches_row_colors(abc_set):
    view = render(abc_set, rank(abc_set), loaded(abc_set), ScrollState())
    legend = dict(view.legend)
    
    for row in view.rows:
        assert legend[row.tier] == row.color

def test_source_image_passed_through(abc_set, image):
    view = render(abc_set, rank(abc_set), loaded(abc_set), ScrollState(), source_image=image)
    
    assert view.source_image == image

# --- Loading and error views ---

def test_render_loading(image):
    assert render_loading(image) == LoadingView(source_image=image)
    assert render_loading().source_image is None

def test_render_error_from_analysis_exception():
    view = render_error(InvalidPredictionSet("Bad response", "missing heatmaps"))
    
    assert view == ErrorView(message="Bad response", details="missing heatmaps")

def test_render_error_from_unexpected_exception():
    view = render_error(RuntimeError("boom"))
    
    assert "could not be completed" in view.message
    assert view.details == "boom"

@pytest.mark.parametrize("error", [FetchFailed("Down"), InvalidPredictionSet("Bad")])
def test_error_view_has_no_rows(error):
    view = render_error(error)
    
    assert not hasattr(view, "rows")
