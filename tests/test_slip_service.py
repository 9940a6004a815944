import pytest
from models import CanonicalOddsRecord, OddsQuote, Pick, PickSlip, UNAVAILABLE
from odds_engine import InvalidOddsFormat
from slip_service import (
    pick_from_record, add_pick, remove_pick, clear_slip, summarize_slip, post_caption
)

def test_pick_from_record(sample_game):
    record = CanonicalOddsRecord(provider="FanDuel", market="spread", side="away", price=-110, point=3.5)
    pick = pick_from_record(record, sample_game, reasoning="Celtics cover on the road", stake=20)
    assert pick.quote.price == -110
    assert pick.quote.point == 3.5
    assert pick.reasoning == "Celtics cover on the road"
    assert pick.stake == 20.0

def test_pick_from_record_drops_moneyline_point(sample_game):
    record = CanonicalOddsRecord(market="moneyline", side="home", price=-155, point=0.0)
    assert pick_from_record(record, sample_game).quote.point is None

def test_pick_from_record_unavailable(sample_game):
    record = CanonicalOddsRecord(provider="ESPN BET", market="moneyline", side="home", price=UNAVAILABLE)
    with pytest.raises(InvalidOddsFormat):
        pick_from_record(record, sample_game)

    with pytest.raises(ValueError):
        pick_from_record(CanonicalOddsRecord(price=-110), sample_game)

def test_add_pick_rejects_duplicate_leg(make_pick):
    slip = PickSlip()
    assert add_pick(slip, make_pick(-110, market="spread", side="home", point=-3.5))
    assert not add_pick(slip, make_pick(-115, market="spread", side="Home", point=-3.5))
    assert add_pick(slip, make_pick(-110, market="spread", side="home", point=-4.5))
    assert slip.pick_count == 2

def test_remove_and_clear(make_pick):
    slip = PickSlip()
    add_pick(slip, make_pick(-110))
    add_pick(slip, make_pick(150, side="away"))

    removed = remove_pick(slip, 0)
    assert removed.quote.price == -110
    assert remove_pick(slip, 5) is None
    assert slip.pick_count == 1

    clear_slip(slip)
    assert not slip.is_displayable

def test_summarize_empty_slip():
    assert summarize_slip(PickSlip()) is None
    assert post_caption(PickSlip()) == ""

def test_summarize_single(make_pick):
    slip = PickSlip(picks=[make_pick(-150, stake=10)])
    summary = summarize_slip(slip)
    assert summary.kind == "single"
    assert summary.parlay_odds is None
    assert summary.legs == ["Lakers ML (-150)"]
    assert summary.total_stake == 10.0
    assert post_caption(slip) == "My pick"

def test_summarize_three_leg_parlay(make_pick):
    slip = PickSlip()
    add_pick(slip, make_pick(-110, market="spread", side="away", point=3.5))
    add_pick(slip, make_pick(120))
    add_pick(slip, make_pick(-150, market="total", side="over", point=228.5))

    summary = summarize_slip(slip)
    assert summary.kind == "parlay"
    assert summary.leg_count == 3
    assert summary.parlay_odds == "+600"
    assert summary.combined_decimal == pytest.approx(7.0)
    assert summary.legs[0] == "Celtics +3.5 (-110)"
    assert post_caption(slip) == "My 3-leg parlay"

def test_summarize_renders_bad_leg_as_na(make_pick, sample_game):
    bad_quote = OddsQuote.model_construct(price=50, market="moneyline", side="home", point=None)
    bad_pick = Pick.model_construct(id=None, game=sample_game, quote=bad_quote, reasoning=None, stake=None)
    slip = PickSlip(picks=[make_pick(-110, side="away")])
    slip.picks.append(bad_pick)

    summary = summarize_slip(slip)
    assert summary.parlay_odds == "N/A"
    assert summary.combined_decimal is None
    assert summary.legs[1] == "Lakers ML (N/A)"
