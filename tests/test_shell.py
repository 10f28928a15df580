import io

from tlox.shell import Shell


def make_shell():
    return Shell(stdout=io.StringIO())


def test_state_persists_between_lines(capsys):
    shell = make_shell()
    shell.onecmd('var a = 1;')
    shell.onecmd('fun inc() { a = a + 1; }')
    shell.onecmd('inc();')
    shell.onecmd('print a;')
    assert capsys.readouterr().out == '2\n'
    assert len(shell.parser.statements) == 4


def test_only_new_statements_run(capsys):
    shell = make_shell()
    shell.onecmd('print "once";')
    shell.onecmd('print "twice";')
    assert capsys.readouterr().out.splitlines() == ['once', 'twice']


def test_open_braces_continue_the_input(capsys):
    shell = make_shell()
    shell.onecmd('fun greet(name) {')
    assert shell.prompt == shell.secondary_prompt
    shell.onecmd('  print "hi " + name;')
    shell.onecmd('}')
    assert shell.prompt == '> '
    shell.onecmd('greet("you");')
    assert capsys.readouterr().out == 'hi you\n'


def test_errors_do_not_end_the_session(capsys):
    shell = make_shell()
    shell.onecmd('print ;')
    shell.onecmd('print missing;')
    shell.onecmd('print "alive";')
    out, err = capsys.readouterr()
    assert out == 'alive\n'
    assert 'Expect expression.' in err
    assert "Undefined variable 'missing'." in err


def test_needs_continuation():
    assert Shell.needs_continuation('if (x) {\n')
    assert Shell.needs_continuation('print (1 +\n')
    assert not Shell.needs_continuation('{ print 1; }\n')


def test_exit_commands_stop_the_loop(capsys):
    shell = make_shell()
    assert shell.onecmd('exit') is True
    assert shell.onecmd('EOF') is True


def test_empty_line_does_nothing(capsys):
    shell = make_shell()
    shell.onecmd('print 1;')
    capsys.readouterr()
    assert not shell.emptyline()
    assert capsys.readouterr().out == ''


def test_brackets_inside_strings_and_comments_do_not_continue(capsys):
    shell = make_shell()
    shell.onecmd('print "{";')
    assert shell.prompt == '> '
    shell.onecmd("print '(' + 2; // (")
    shell.onecmd('print 3; /* { */')
    assert shell.prompt == '> '
    assert capsys.readouterr().out.splitlines() == ['{', '(2', '3']
    assert not Shell.needs_continuation('print "{";\n')
    assert Shell.needs_continuation('fun f() { // }\n')


def test_command_words_are_variables_inside_statements(capsys):
    shell = make_shell()
    assert not shell.onecmd('exit = 3;')
    assert not shell.onecmd('help = exit + 1;')
    shell.onecmd('print help;')
    assert capsys.readouterr().out == '4\n'
    assert shell.interpreter.get_var('exit') == 3


def test_help_prints_the_intro(capsys):
    shell = make_shell()
    assert not shell.onecmd('help')
    assert 'Welcome to the tlox interpreter!' in capsys.readouterr().out
