# -*- coding: utf-8 -*-
"""
Tests for the processing functions proc_variance, proc_select_classes and
proc_z_score.
"""

import numpy as np
import pytest

from bbci import config
from bbci.misc.errors import (
    DisallowedValue,
    MissingField,
    OptionError,
    ValueKindMismatch,
)
from bbci.processing import proc_select_classes, proc_variance, proc_z_score
from bbci.processing.variance import _section_bounds
from bbci.processing.z_score import Z_SCORE_PROPS


@pytest.fixture
def cnt():
    ramp = np.arange(6.0)
    return {'x': np.column_stack([ramp, 2 * ramp]), 'fs': 100, 'clab': ['C3', 'C4']}


@pytest.fixture
def epo():
    rng = np.random.default_rng(42)
    return {
        'x': rng.standard_normal((3, 2, 6)),
        'y': np.array([[1, 0, 1, 0, 1, 0],
                       [0, 1, 0, 1, 0, 1]]),
        'className': ['left', 'right'],
        'clab': ['C3', 'C4'],
        'fs': 100,
    }


def expected_z(x, ev1, ev2, average=np.mean, std=np.std):
    m1, m2 = average(x[..., ev1], axis=-1), average(x[..., ev2], axis=-1)
    s1, s2 = std(x[..., ev1], axis=-1, ddof=1), std(x[..., ev2], axis=-1, ddof=1)
    return (m1 - m2) / np.sqrt(s1 ** 2 / len(ev1) + s2 ** 2 / len(ev2))


class TestProcVariance:
    """Variance in equally spaced intervals."""

    def test_single_section(self, cnt):
        out = proc_variance(cnt)
        assert out['x'].shape == (1, 2)
        np.testing.assert_allclose(out['x'], [[3.5, 14.0]])
        np.testing.assert_array_equal(out['t'], [5])

    def test_two_sections(self, cnt):
        out = proc_variance(cnt, 2)
        np.testing.assert_allclose(out['x'], [[1.0, 4.0], [1.0, 4.0]])
        np.testing.assert_array_equal(out['t'], [2, 5])

    def test_std(self, cnt):
        expected = [[np.sqrt(3.5), np.sqrt(14.0)]]
        np.testing.assert_allclose(proc_variance(cnt, 1, True)['x'], expected)
        np.testing.assert_allclose(proc_variance(cnt, 'std')['x'], expected)
        np.testing.assert_allclose(proc_variance(cnt, 1, 'std')['x'], expected)
        np.testing.assert_allclose(proc_variance(cnt, 1, 'var')['x'], [[3.5, 14.0]])

    def test_epoched_data(self, epo):
        out = proc_variance(epo)
        assert out['x'].shape == (1, 2, 6)
        np.testing.assert_allclose(out['x'][0], epo['x'].var(axis=0, ddof=1))

    def test_epoch_wise_reduction_for_large_blocks(self, epo, monkeypatch):
        expected = proc_variance(epo)['x']
        monkeypatch.setattr(config, 'VARIANCE_BLOCK_LIMIT', 1)
        np.testing.assert_allclose(proc_variance(epo)['x'], expected)

    def test_scalar_interval_warns(self, cnt):
        cnt['x'] = cnt['x'][:3]
        with pytest.warns(UserWarning, match='calculating variance of scalar'):
            out = proc_variance(cnt, 3)
        np.testing.assert_array_equal(out['x'], np.zeros((3, 2)))

    def test_section_bounds_round_half_up(self):
        np.testing.assert_array_equal(_section_bounds(5, 2), [0, 3, 5])
        np.testing.assert_array_equal(_section_bounds(6, 3), [0, 2, 4, 6])

    def test_input_not_modified(self, cnt):
        x = cnt['x'].copy()
        out = proc_variance(cnt, 2)
        np.testing.assert_array_equal(cnt['x'], x)
        assert 'history' not in cnt
        assert out['history'][-1]['fcn'] == 'proc_variance'
        assert out['clab'] == ['C3', 'C4']

    def test_too_many_sections(self, cnt):
        with pytest.raises(ValueError, match='n_sections'):
            proc_variance(cnt, 7)

    def test_invalid_arguments(self, cnt):
        with pytest.raises(ValueKindMismatch):
            proc_variance(cnt, 1.5)
        with pytest.raises(DisallowedValue):
            proc_variance(cnt, 1, 'max')
        with pytest.raises(MissingField):
            proc_variance({'fs': 100})


class TestProcSelectClasses:
    """Class selection of epoched data."""

    def test_select_by_name(self, epo):
        out = proc_select_classes(epo, 'right')
        assert out['className'] == ['right']
        np.testing.assert_array_equal(out['x'], epo['x'][..., [1, 3, 5]])
        np.testing.assert_array_equal(out['y'], [[1, 1, 1]])

    def test_order_follows_selection(self, epo):
        out = proc_select_classes(epo, [1, 0])
        assert out['className'] == ['right', 'left']
        np.testing.assert_array_equal(out['y'], epo['y'][::-1])
        assert out['x'].shape == (3, 2, 6)

    def test_unknown_class(self, epo):
        with pytest.raises(ValueError, match="Class 'up' not found"):
            proc_select_classes(epo, ['left', 'up'])

    @pytest.mark.parametrize('index', [-1, 2, [0, 5]])
    def test_index_out_of_range(self, epo, index):
        with pytest.raises(ValueError, match='out of range'):
            proc_select_classes(epo, index)


class TestProcZScore:
    """Z-score of the difference between two classes."""

    def test_z_score(self, epo):
        out = proc_z_score(epo)
        np.testing.assert_allclose(out['x'], expected_z(epo['x'], [0, 2, 4], [1, 3, 5]))
        assert out['x'].shape == (3, 2)
        assert out['className'] == ['z( left , right )']
        assert out['yUnit'] == 'z-score'
        np.testing.assert_array_equal(out['y'], [[1]])
        np.testing.assert_array_equal(out['N'], [3, 3])
        assert out['std'].shape == (3, 2, 2)
        assert out['clab'] == ['C3', 'C4']
        assert out['history'][-1]['fcn'] == 'proc_z_score'

    def test_class_order(self, epo):
        out = proc_z_score(epo, classes=['right', 'left'])
        np.testing.assert_allclose(out['x'], expected_z(epo['x'], [1, 3, 5], [0, 2, 4]))
        assert out['className'] == ['z( right , left )']

    def test_median_policy(self, epo):
        out = proc_z_score(epo, 'policy', 'median')
        np.testing.assert_allclose(
            out['x'], expected_z(epo['x'], [0, 2, 4], [1, 3, 5], average=np.median))

    def test_option_spelling_variants(self, epo):
        out = proc_z_score(epo, 'Policy', 'median', policy='mean')
        assert out['history'][-1]['params'] == {'policy': 'mean', 'classes': 'ALL', 'std': True}
        np.testing.assert_allclose(out['x'], expected_z(epo['x'], [0, 2, 4], [1, 3, 5]))

    def test_nanmean_policy(self, epo):
        epo['x'][0, 0, 0] = np.nan
        out = proc_z_score(epo, {'policy': 'nanmean'})
        np.testing.assert_allclose(
            out['x'],
            expected_z(epo['x'], [0, 2, 4], [1, 3, 5], average=np.nanmean, std=np.nanstd))
        assert np.isfinite(out['x']).all()

    def test_without_std(self, epo):
        out = proc_z_score(epo, 'std', False)
        assert 'std' not in out
        np.testing.assert_allclose(out['x'], expected_z(epo['x'], [0, 2, 4], [1, 3, 5]))

    def test_props(self):
        assert proc_z_score(None) == Z_SCORE_PROPS

    def test_input_not_modified(self, epo):
        proc_z_score(epo)
        assert 'history' not in epo
        assert epo['x'].shape == (3, 2, 6)

    def test_missing_labels(self, epo):
        del epo['y']
        del epo['className']
        with pytest.warns(UserWarning, match='no classes label found'):
            with pytest.raises(ValueError, match='exactly two classes'):
                proc_z_score(epo)

    def test_one_epoch_per_class(self, epo):
        epo['x'] = epo['x'][..., :2]
        epo['y'] = np.eye(2)
        with pytest.warns(UserWarning, match='only one epoch per class'):
            out = proc_z_score(epo)
        assert out['className'] == ['left', 'right']
        np.testing.assert_array_equal(out['N'], [1, 1])
        assert out['x'].shape == (3, 2, 2)

    def test_single_epoch_class(self, epo):
        epo['x'] = epo['x'][..., :4]
        epo['y'] = np.array([[1, 0, 0, 0],
                             [0, 1, 1, 1]])
        out = proc_z_score(epo)
        assert np.all(np.isfinite(out['x']))
        np.testing.assert_array_equal(out['N'], [1, 3])
        np.testing.assert_array_equal(out['std'][..., 0], np.zeros((3, 2)))
        x = epo['x']
        m2 = x[..., 1:].mean(axis=-1)
        s2 = x[..., 1:].std(axis=-1, ddof=1)
        np.testing.assert_allclose(out['x'], (x[..., 0] - m2) / np.sqrt(s2 ** 2 / 3))

    def test_unknown_class(self, epo):
        with pytest.raises(ValueError, match="Class 'up' not found"):
            proc_z_score(epo, classes=['left', 'up'])

    def test_invalid_options(self, epo):
        with pytest.raises(DisallowedValue):
            proc_z_score(epo, policy='mode')
        with pytest.raises(OptionError):
            proc_z_score(epo, 'foo', 1)

    def test_missing_clab(self, epo):
        del epo['clab']
        with pytest.raises(MissingField, match='clab'):
            proc_z_score(epo)
