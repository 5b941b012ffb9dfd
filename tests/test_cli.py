"""
Critical CLI tests — argument handling, listing output and deletion safety.
These tests prevent bugs that could delete reference files or the wrong candidates.
"""
import sys
from unittest import mock
import pytest
from refdedup.cli import CLIApplication
from refdedup.core.models import OperationKind
from refdedup.services.file_service import FileService


def run_cli(*argv):
    with mock.patch.object(sys, 'argv', ['refdedup', *argv]):
        app = CLIApplication()
        app.run()
    return app


class TestArgumentParsing:

    def test_defaults(self):
        args = CLIApplication.parse_args(['--reference', '/ref', '--candidates', '/a', '/b'])
        assert args.reference == '/ref'
        assert args.candidates == ['/a', '/b']
        assert args.operation == 'duplicate'
        assert args.skip_groups == 0
        assert args.ignore_sizes == ['4096']
        assert not args.delete and not args.force and not args.permanent
        assert not args.no_throttle

    def test_short_flags(self):
        args = CLIApplication.parse_args(['-r', '/ref', '-c', '/a', '-o', 'originals', '-q'])
        assert args.operation == 'originals'
        assert args.quiet

    def test_unknown_operation_rejected(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(['-r', '/ref', '-c', '/a', '-o', 'hardlink'])

    def test_candidates_required(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(['-r', '/ref'])

    @pytest.mark.parametrize("alias, kind", [
        ("duplicate", OperationKind.DUPLICATE),
        ("duplicates", OperationKind.DUPLICATE),
        ("originals", OperationKind.ORIGINALS),
        ("unique", OperationKind.ORIGINALS),
    ])
    def test_operation_aliases(self, trees, alias, kind):
        app = CLIApplication()
        args = app.parse_args(['-r', str(trees["reference"]), '-c', str(trees["candidate"]), '-o', alias])
        params = app.create_params(args)
        assert params.operation is kind

    def test_create_params_converts_sizes(self, trees):
        app = CLIApplication()
        args = app.parse_args([
            '-r', str(trees["reference"]), '-c', str(trees["candidate"]),
            '--ignore-sizes', '4096', '1K', '--skip-groups', '3', '--no-throttle'
        ])
        params = app.create_params(args)
        assert params.excluded_sizes == frozenset({4096, 1024})
        assert params.skip_groups == 3
        assert params.throttle is False


class TestArgumentValidation:

    def test_force_requires_delete(self, trees):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--force')

    def test_permanent_requires_delete(self, trees):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--permanent')

    def test_interactive_delete_refused_without_tty(self, trees):
        with mock.patch.object(sys.stdin, 'isatty', return_value=False):
            with pytest.raises(SystemExit):
                run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--delete')
        assert trees["b"].exists()

    def test_missing_candidate_directory(self, trees, tmp_path):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["reference"]), '-c', str(tmp_path / "missing"))

    def test_file_as_reference_rejected(self, trees):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["a"]), '-c', str(trees["candidate"]))

    def test_negative_skip_groups(self, trees):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--skip-groups', '-1')

    def test_invalid_ignore_size(self, trees):
        with pytest.raises(SystemExit):
            run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--ignore-sizes', 'lots')


class TestListing:

    def test_lists_duplicates(self, trees, capsys):
        run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]))
        out = capsys.readouterr().out
        assert "List of Duplicates (1 files):" in out
        assert str(trees["b"].resolve()) in out
        assert str(trees["c"].resolve()) not in out

    def test_lists_originals(self, trees, capsys):
        run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '-o', 'originals')
        out = capsys.readouterr().out
        assert "List of Originals (1 files):" in out
        assert str(trees["c"].resolve()) in out

    def test_nothing_found(self, trees, capsys):
        trees["b"].write_bytes(b"9876543210")
        run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]))
        assert "No duplicates found." in capsys.readouterr().out

    def test_output_in_reverse_path_order(self, trees):
        app = CLIApplication()
        args = app.parse_args(['-r', str(trees["reference"]), '-c', str(trees["candidate"])])
        params = app.create_params(args)
        ordered = app.output_results(['/c/a', '/c/b/x', '/c/b'], params)
        assert ordered == ['/c/b/x', '/c/b', '/c/a']


class TestDeletion:

    def test_force_delete_moves_duplicate_to_trash(self, trees):
        with mock.patch.object(FileService, 'move_to_trash') as mock_trash:
            run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]), '--delete', '--force')

        deleted_paths = [str(call.args[0]) for call in mock_trash.call_args_list]
        assert deleted_paths == [str(trees["b"].resolve())]
        assert str(trees["a"].resolve()) not in deleted_paths, "Reference file MUST be preserved"

    def test_permanent_delete_prunes_empty_directory(self, trees, capsys):
        run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]),
                '--delete', '--force', '--permanent')

        assert not trees["b"].exists()
        assert not trees["b"].parent.exists()
        assert trees["c"].exists()
        assert trees["a"].exists()
        assert trees["candidate"].is_dir()
        out = capsys.readouterr().out
        assert "Successfully deleted 1 files." in out
        assert "Removed 1 empty directories." in out

    def test_originals_deletion_keeps_duplicates(self, trees):
        run_cli('-r', str(trees["reference"]), '-c', str(trees["candidate"]),
                '-o', 'originals', '--delete', '--force', '--permanent')
        assert not trees["c"].exists()
        assert trees["b"].exists()

    def test_nested_candidate_never_touches_reference_files(self, nested_trees):
        run_cli('-r', str(nested_trees["reference"]), '-c', str(nested_trees["candidate"]),
                '--delete', '--force', '--permanent')
        assert nested_trees["a"].exists()
        assert not nested_trees["b"].exists()
        assert nested_trees["c"].exists()
        assert nested_trees["candidate"].is_dir()

    def test_declined_confirmation_keeps_files(self, trees, capsys):
        app = CLIApplication()
        args = app.parse_args(['-r', str(trees["reference"]), '-c', str(trees["candidate"])])
        params = app.create_params(args)
        with mock.patch.object(app, 'ask_yes_no', return_value=False):
            app.execute_delete([str(trees["b"].resolve())], params, force=False, permanent=True)
        assert trees["b"].exists()
        assert "NOT DELETED" in capsys.readouterr().out

    def test_partial_failure_reported(self, trees, capsys):
        app = CLIApplication()
        args = app.parse_args(['-r', str(trees["reference"]), '-c', str(trees["candidate"])])
        params = app.create_params(args)
        with mock.patch.object(FileService, 'move_to_trash', side_effect=RuntimeError("Access denied")):
            report = app.execute_delete([str(trees["b"].resolve())], params, force=True)
        assert report.failed
        assert "Partial success: 0/1" in capsys.readouterr().out
