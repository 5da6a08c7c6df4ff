from xsmforge.splfiles import expand_path, output_filename, remove_extension


def test_expand_variable_with_rest():
    env = {"HOME": "/home/user"}
    assert expand_path("$HOME/src/prog.spl", env) == "/home/user/src/prog.spl"


def test_expand_variable_alone():
    env = {"HOME": "/home/user"}
    assert expand_path("$HOME", env) == "/home/user"


def test_unknown_variable_kept():
    assert expand_path("$NOPE/a.spl", {}) == "$NOPE/a.spl"


def test_plain_paths_unchanged():
    env = {"HOME": "/home/user"}
    assert expand_path("dir/file.spl", env) == "dir/file.spl"
    assert expand_path("/abs/file.spl", env) == "/abs/file.spl"
    assert expand_path("file.spl", env) == "file.spl"


def test_remove_extension_keeps_dot():
    assert remove_extension("prog.spl") == "prog."
    assert remove_extension("a.b.c") == "a.b."


def test_remove_extension_without_dot_is_empty():
    assert remove_extension("program") == ""


def test_output_filename():
    assert output_filename("prog.spl") == "prog.xsm"
    assert output_filename("os/startup.spl") == "os/startup.xsm"


def test_output_filename_ends_with_xsm():
    for name in ["a.spl", "b.x.y", "noext"]:
        assert output_filename(name).endswith("xsm")