# Integration tests for complete workflows, driven through the command line entry point

import pytest
import os
import sys
import zlib

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'jot-project'))

import jot
from utils import repository, objects
from utils.index import Index


def run_jot(capsys, *argv):
    exit_code = jot.main(list(argv))
    captured = capsys.readouterr()
    return exit_code, captured.out, captured.err


class TestInit:

    def test_init_creates_jot_directory(self, temp_dir, capsys):
        code, out, _ = run_jot(capsys, '-C', temp_dir, 'init')

        jot_dir = os.path.join(temp_dir, '.jot')
        assert code == 0
        assert 'Initialized empty Jot repository' in out
        assert os.path.isdir(os.path.join(jot_dir, 'objects'))
        assert os.path.isdir(os.path.join(jot_dir, 'refs', 'heads'))
        with open(os.path.join(jot_dir, 'HEAD')) as f:
            assert f.read() == 'ref: refs/heads/master\n'

    def test_reinit(self, temp_repo, capsys):
        code, out, _ = run_jot(capsys, 'init')
        assert code == 0
        assert 'Reinitialized' in out


class TestNotARepository:

    @pytest.mark.parametrize('argv', [
        ('status',),
        ('add', 'x'),
        ('commit', '-m', 'msg'),
        ('log',),
    ])
    def test_commands_fail_outside_repo(self, temp_dir, capsys, argv):
        code, _, err = run_jot(capsys, '-C', temp_dir, *argv)
        assert code == 1
        assert 'fatal: not a jot repository' in err


class TestBasicWorkflow:
    # Tests for the basic init -> add -> commit -> status workflow

    def test_add_stages_file(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'test.txt', 'test content')

        code, _, _ = run_jot(capsys, 'add', 'test.txt')

        assert code == 0
        entry = Index(temp_repo).load().get('test.txt')
        assert entry.size == len('test content')
        assert objects.read_object(temp_repo, entry.oid) == ('blob', b'test content')

    def test_add_directory_recursively(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'src/a.py', 'a')
        write_file(temp_repo, 'src/pkg/b.py', 'b')

        code, _, _ = run_jot(capsys, 'add', 'src')

        assert code == 0
        assert [e.path for e in Index(temp_repo).load().entries()] == ['src/a.py', 'src/pkg/b.py']

    def test_add_from_subdirectory(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'sub/file.txt', 'x')
        code, _, _ = run_jot(capsys, '-C', os.path.join(temp_repo, 'sub'), 'add', 'file.txt')
        assert code == 0
        assert 'sub/file.txt' in Index(temp_repo).load()

    def test_add_missing_path_still_stages_others(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'real.txt', 'x')

        code, _, err = run_jot(capsys, 'add', 'missing.txt', 'real.txt')

        assert code == 1
        assert "pathspec 'missing.txt' did not match any files" in err
        assert 'real.txt' in Index(temp_repo).load()

    def test_commit_with_empty_index_fails(self, temp_repo, capsys):
        code, _, err = run_jot(capsys, 'commit', '-m', 'nothing')
        assert code == 1
        assert 'nothing to commit' in err

    def test_commit_creates_objects(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'README.md', '# Test')
        write_file(temp_repo, 'docs/guide.md', 'guide')
        run_jot(capsys, 'add', 'README.md', 'docs')

        code, out, _ = run_jot(capsys, 'commit', '-m', 'First commit\n\nwith details')

        assert code == 0
        commit_hash = repository.get_head_commit(temp_repo)
        assert out.strip() == f'[master {commit_hash[:7]}] First commit'

        commit = objects.read_commit(temp_repo, commit_hash)
        assert commit.parent is None
        assert commit.author.startswith('Test User <test@example.com> ')
        assert commit.message == 'First commit\n\nwith details'
        assert set(objects.get_commit_files(temp_repo, commit_hash)) == {'README.md', 'docs/guide.md'}

    def test_second_commit_has_parent(self, repo_with_commit, write_file, capsys):
        repo_root, first = repo_with_commit
        write_file(repo_root, 'new.txt', 'new')
        run_jot(capsys, 'add', 'new.txt')

        code, _, _ = run_jot(capsys, 'commit', '-m', 'Second')

        assert code == 0
        second = repository.get_head_commit(repo_root)
        assert second != first
        assert objects.read_commit(repo_root, second).parent == first

    def test_commit_keeps_index(self, repo_with_commit):
        repo_root, _ = repo_with_commit
        assert 'README.md' in Index(repo_root).load()

    def test_branch_file_ends_with_newline(self, repo_with_commit):
        repo_root, commit_hash = repo_with_commit
        with open(os.path.join(repo_root, '.jot', 'refs', 'heads', 'master')) as f:
            assert f.read() == f'{commit_hash}\n'


class TestStatusCommand:

    def test_clean_repository(self, temp_repo, capsys):
        code, out, _ = run_jot(capsys, 'status')
        assert code == 0
        assert 'On branch master' in out
        assert 'nothing to commit, working tree clean' in out

    def test_porcelain_empty(self, temp_repo, capsys):
        code, out, _ = run_jot(capsys, 'status', '--porcelain')
        assert code == 0
        assert out.strip() == ''

    def test_human_sections(self, repo_with_commit, write_file, capsys):
        repo_root, _ = repo_with_commit
        write_file(repo_root, 'staged.txt', 'new')
        run_jot(capsys, 'add', 'staged.txt')
        write_file(repo_root, 'README.md', 'rewritten with a different size\n')
        write_file(repo_root, 'loose/untracked.txt', 'u')

        code, out, _ = run_jot(capsys, 'status')

        assert code == 0
        assert 'Changes to be committed:' in out
        assert 'new file:   staged.txt' in out
        assert 'Changes not staged for commit:' in out
        assert 'modified:   README.md' in out
        assert 'Untracked files:' in out
        assert '\tloose/\n' in out
        assert 'untracked.txt' not in out

    def test_porcelain_lines(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'gone.txt', 'g')
        write_file(temp_repo, 'kept.txt', 'k')
        run_jot(capsys, 'add', 'gone.txt', 'kept.txt')
        os.remove(os.path.join(temp_repo, 'gone.txt'))
        write_file(temp_repo, 'dir1/dir2/file.txt', 'f')
        write_file(temp_repo, 'root.txt', 'r')

        code, out, _ = run_jot(capsys, 'status', '--porcelain')

        assert code == 0
        assert out.splitlines() == [
            'AD gone.txt',
            'A  kept.txt',
            '?? dir1/',
            '?? root.txt',
        ]

    def test_corrupt_index_is_treated_as_empty(self, temp_repo, write_file, capsys):
        write_file(temp_repo, 'x.txt', 'x')
        run_jot(capsys, 'add', 'x.txt')
        index_path = os.path.join(temp_repo, '.jot', 'index')
        with open(index_path, 'r+b') as f:
            f.seek(16)
            f.write(b'\xff\xff')

        code, out, _ = run_jot(capsys, 'status', '--porcelain')

        assert code == 0
        assert out.splitlines() == ['?? x.txt']

    def test_corrupt_head_object_fails(self, repo_with_commit, capsys):
        repo_root, commit_hash = repo_with_commit
        path = objects.object_path(repo_root, commit_hash)
        os.chmod(path, 0o644)
        with open(path, 'wb') as f:
            f.write(zlib.compress(b'commit'))

        code, _, err = run_jot(capsys, 'status')

        assert code == 1
        assert f'corrupt object {commit_hash}' in err


class TestLogAndConfig:

    def test_log_without_commits(self, temp_repo, capsys):
        code, out, _ = run_jot(capsys, 'log')
        assert code == 1
        assert "does not have any commits yet" in out

    def test_log_lists_history_newest_first(self, repo_with_commit, write_file, capsys):
        repo_root, first = repo_with_commit
        write_file(repo_root, 'b.txt', 'b')
        run_jot(capsys, 'add', 'b.txt')
        run_jot(capsys, 'commit', '-m', 'Add b')
        second = repository.get_head_commit(repo_root)

        code, out, _ = run_jot(capsys, 'log')

        assert code == 0
        assert out.index(f'commit {second}') < out.index(f'commit {first}')
        assert '    Add b' in out
        assert '    Initial commit' in out

    def test_config_sets_identity(self, temp_repo, write_file, capsys):
        code, out, _ = run_jot(capsys, 'config', 'user.name', 'Ada')
        assert code == 0
        assert "Set user.name to 'Ada'" in out

        write_file(temp_repo, 'f.txt', 'f')
        run_jot(capsys, 'add', 'f.txt')
        run_jot(capsys, 'commit', '-m', 'by ada')
        commit = objects.read_commit(temp_repo, repository.get_head_commit(temp_repo))
        assert commit.author.startswith('Ada <test@example.com> ')

    def test_config_invalid_key(self, temp_repo, capsys):
        code, _, err = run_jot(capsys, 'config', 'nodot', 'value')
        assert code == 1
        assert "invalid key" in err
