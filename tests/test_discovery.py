"""Tests for workload discovery"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from zg.compression import FileKind
from zg.discovery import build_search_pattern, discover, expand_glob, validate_glob
from zg.exceptions import DiscoveryError, GlobExpansionError, MetadataError
from zg.matcher import LiteralMatcher


@pytest.fixture
def matcher():
    return LiteralMatcher('foo')


class TestBuildSearchPattern:
    """Tests for build_search_pattern()"""

    def test_default_glob(self):
        assert build_search_pattern('/var/log') == '/var/log/*'

    def test_trailing_separators_stripped(self):
        assert build_search_pattern('/var/log/', '*.log') == '/var/log/*.log'
        assert build_search_pattern('/var/log///', '*.log') == '/var/log/*.log'

    def test_root(self):
        assert build_search_pattern('/', '*') == '/*'


class TestValidateGlob:
    """Tests for validate_glob()"""

    @pytest.mark.parametrize('pattern', ['*', '*.log', '**/*.gz', 'a/**/b', '[abc]*', '[!a]*', '[]]x', 'file?.txt'])
    def test_valid(self, pattern):
        validate_glob(pattern)

    @pytest.mark.parametrize('pattern', ['[abc', '*.[lo', 'a**', '**b/*', 'x/a**/y'])
    def test_invalid(self, pattern):
        with pytest.raises(GlobExpansionError):
            validate_glob(pattern)


class TestExpandGlob:
    """Tests for expand_glob()"""

    def test_missing_source_directory(self, tmp_path):
        with pytest.raises(GlobExpansionError):
            expand_glob(str(tmp_path / 'missing'))

    def test_source_is_a_file(self, make_file):
        path = make_file('a.txt', 'foo')
        with pytest.raises(GlobExpansionError):
            expand_glob(str(path))

    def test_skips_directories(self, tmp_path, make_file):
        make_file('a.txt', 'foo')
        (tmp_path / 'subdir').mkdir()

        paths = expand_glob(str(tmp_path))

        assert [p.name for p in paths] == ['a.txt']

    def test_includes_hidden_files(self, tmp_path, make_file):
        make_file('.hidden', 'foo')
        make_file('visible', 'foo')

        paths = expand_glob(str(tmp_path))

        assert sorted(p.name for p in paths) == ['.hidden', 'visible']

    def test_recursive_glob(self, tmp_path, make_file):
        make_file('top.log', 'foo')
        make_file('a/nested.log', 'foo')
        make_file('a/b/deep.log', 'foo')
        make_file('a/b/deep.txt', 'foo')

        paths = expand_glob(str(tmp_path), '**/*.log')

        assert sorted(p.name for p in paths) == ['deep.log', 'nested.log', 'top.log']

    def test_no_matches_is_not_an_error(self, tmp_path, make_file):
        make_file('a.txt', 'foo')
        assert expand_glob(str(tmp_path), '*.log') == []


class TestDiscover:
    """Tests for discover()"""

    def test_sorted_newest_first(self, tmp_path, make_file, matcher):
        make_file('old.txt', mtime=1_000)
        make_file('new.txt', mtime=3_000)
        make_file('mid.txt', mtime=2_000)

        workloads = discover(str(tmp_path), matcher=matcher)

        assert [wl.file_path.name for wl in workloads] == ['new.txt', 'mid.txt', 'old.txt']
        assert [wl.last_modified for wl in workloads] == [3_000, 2_000, 1_000]

    def test_take_keeps_newest(self, tmp_path, make_file, matcher):
        for i in range(5):
            make_file(f'f{i}.txt', mtime=1_000 + i)

        workloads = discover(str(tmp_path), take=2, matcher=matcher)

        assert [wl.file_path.name for wl in workloads] == ['f4.txt', 'f3.txt']

    @pytest.mark.parametrize('take', [3, 4, 100, None])
    def test_take_at_or_above_count_keeps_all(self, tmp_path, make_file, matcher, take):
        for i in range(3):
            make_file(f'f{i}.txt', mtime=1_000 + i)

        workloads = discover(str(tmp_path), take=take, matcher=matcher)

        assert [wl.file_path.name for wl in workloads] == ['f2.txt', 'f1.txt', 'f0.txt']

    def test_equal_mtimes_keep_path_order(self, tmp_path, make_file, matcher):
        for name in ['c.txt', 'a.txt', 'b.txt']:
            make_file(name, mtime=5_000)

        first = discover(str(tmp_path), matcher=matcher)
        second = discover(str(tmp_path), matcher=matcher)

        assert [wl.file_path.name for wl in first] == ['a.txt', 'b.txt', 'c.txt']
        assert [wl.file_path for wl in first] == [wl.file_path for wl in second]

    def test_glob_filters(self, tmp_path, make_file, matcher):
        make_file('app.log', mtime=1_000)
        make_file('notes.txt', mtime=2_000)

        workloads = discover(str(tmp_path), '*.log', matcher=matcher)

        assert [wl.file_path.name for wl in workloads] == ['app.log']

    def test_file_kinds(self, tmp_path, make_file, make_zip, matcher):
        make_file('plain.txt', 'foo', mtime=1_000)
        make_file('noext', 'foo', mtime=2_000)
        make_file('logs.gz', 'foo', mtime=3_000)
        make_zip('logs.zip', [('a.txt', 'foo')], mtime=4_000)

        kinds = {wl.file_path.name: wl.file_kind for wl in discover(str(tmp_path), matcher=matcher)}

        assert kinds == {
            'logs.zip': FileKind.ZIP,
            'logs.gz': FileKind.GZIP,
            'noext': FileKind.PLAIN,
            'plain.txt': FileKind.PLAIN,
        }

    def test_workloads_start_empty_with_own_matcher(self, tmp_path, make_file, matcher):
        make_file('a.txt', 'foo')
        make_file('b.txt', 'foo')

        workloads = discover(str(tmp_path), matcher=matcher)

        assert all(wl.matches == [] for wl in workloads)
        assert all(wl.error is None for wl in workloads)
        assert all(wl.matcher == matcher and wl.matcher is not matcher for wl in workloads)
        assert workloads[0].matcher is not workloads[1].matcher

    def test_returns_frozen_sequence(self, tmp_path, make_file, matcher):
        make_file('a.txt', 'foo')
        workloads = discover(str(tmp_path), matcher=matcher)
        assert isinstance(workloads, tuple)

    def test_empty_directory(self, tmp_path, matcher):
        assert discover(str(tmp_path), matcher=matcher) == ()

    def test_missing_directory(self, tmp_path, matcher):
        with pytest.raises(DiscoveryError):
            discover(str(tmp_path / 'nope'), matcher=matcher)

    def test_malformed_glob(self, tmp_path, matcher):
        with pytest.raises(GlobExpansionError):
            discover(str(tmp_path), '[abc', matcher=matcher)

    def test_metadata_failure_is_fatal(self, tmp_path, make_file, matcher):
        make_file('a.txt', 'foo')

        with patch.object(Path, 'stat', side_effect=OSError('permission denied')):
            with pytest.raises(MetadataError) as exc_info:
                discover(str(tmp_path), matcher=matcher)

        assert 'a.txt' in str(exc_info.value)

    def test_last_modified_fixed_at_discovery(self, tmp_path, make_file, matcher):
        path = make_file('a.txt', 'foo', mtime=1_000)
        workloads = discover(str(tmp_path), matcher=matcher)

        os.utime(path, (9_000, 9_000))

        assert workloads[0].last_modified == 1_000
