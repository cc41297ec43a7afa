import numpy as np
import pytest

from wall_follower.sectors import InputError, Sector, SectorAggregator


RANGE_MAX = 3.5


def make_scan(n=360, value=RANGE_MAX):
    return [value] * n


def test_all_max_scan_gives_all_max_clearances():
    clearances = SectorAggregator().aggregate(make_scan(), RANGE_MAX)
    assert clearances.shape == (12,)
    assert np.all(clearances == RANGE_MAX)


def test_clearances_stay_within_range():
    rng = np.random.default_rng(7)
    scan = rng.uniform(-1.0, 10.0, size=360)
    scan[::17] = np.inf
    scan[::23] = np.nan
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert np.all(clearances >= 0.0)
    assert np.all(clearances <= RANGE_MAX)


@pytest.mark.parametrize('index', [0, 359])
def test_front_sector_wraps_around_zero(index):
    scan = make_scan()
    scan[index] = 0.25
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert clearances[Sector.FRONT] == pytest.approx(0.25)
    # The sample only belongs to the forward beam
    assert np.all(clearances[1:] == RANGE_MAX)


def test_front_window_edges():
    aggregator = SectorAggregator()
    scan = make_scan()
    scan[350] = 1.0
    scan[9] = 0.9
    # Outside the half-open window [-10, 10)
    scan[10] = 0.1
    scan[349] = 0.1
    clearances = aggregator.aggregate(scan, RANGE_MAX)
    assert clearances[Sector.FRONT] == pytest.approx(0.9)


def test_each_bearing_picks_its_own_minimum():
    scan = make_scan()
    for sector in Sector:
        scan[sector.value * 30 + 5] = 0.1 + 0.05 * sector.value
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    for sector in Sector:
        assert clearances[sector] == pytest.approx(0.1 + 0.05 * sector.value)


def test_left_front_uses_degrees_50_to_69():
    scan = make_scan()
    scan[50] = 0.5
    scan[70] = 0.2
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert clearances[Sector.LEFT_FRONT] == pytest.approx(0.5)
    assert clearances[Sector.LEFT] == pytest.approx(0.2)


def test_values_beyond_range_max_are_clamped():
    scan = make_scan(value=12.0)
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert np.all(clearances == RANGE_MAX)


def test_invalid_samples_are_treated_as_clear():
    scan = make_scan()
    scan[0] = float('nan')
    scan[1] = -1.0
    scan[2] = float('inf')
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert clearances[Sector.FRONT] == RANGE_MAX


def test_higher_resolution_scan_is_scaled():
    scan = make_scan(n=720)
    # 45 degrees at two samples per degree, inside the front-left beam
    scan[70] = 0.4
    clearances = SectorAggregator().aggregate(scan, RANGE_MAX)
    assert clearances[Sector.FRONT_LEFT] == pytest.approx(0.4)
    assert clearances[Sector.FRONT] == RANGE_MAX


def test_input_is_not_mutated():
    scan = np.full(360, 5.0)
    SectorAggregator().aggregate(scan, RANGE_MAX)
    assert np.all(scan == 5.0)


def test_result_is_read_only():
    clearances = SectorAggregator().aggregate(make_scan(), RANGE_MAX)
    with pytest.raises(ValueError):
        clearances[0] = 0.0


def test_short_scan_is_rejected():
    with pytest.raises(InputError):
        SectorAggregator().aggregate(make_scan(n=359), RANGE_MAX)


def test_empty_scan_is_rejected():
    with pytest.raises(InputError):
        SectorAggregator().aggregate([], RANGE_MAX)


@pytest.mark.parametrize('range_max', [0.0, -1.0, float('inf'), float('nan')])
def test_bad_range_max_is_rejected(range_max):
    with pytest.raises(InputError):
        SectorAggregator().aggregate(make_scan(), range_max)


def test_input_error_is_a_value_error():
    assert issubclass(InputError, ValueError)


def test_windows_never_index_out_of_bounds():
    aggregator = SectorAggregator()
    for window in aggregator.sector_windows(360):
        assert len(window) == 20
        assert window.min() >= 0
        assert window.max() < 360


@pytest.mark.parametrize('num_sectors', [0, 7])
def test_num_sectors_must_divide_circle(num_sectors):
    with pytest.raises(ValueError):
        SectorAggregator(num_sectors=num_sectors)
