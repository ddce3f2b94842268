import pytest

from oasroute.validator import (
    SpecValidationError,
    ValidationIssue,
    fail_if_issues,
    print_issues,
)


def _issue(location="/pets → GET", kind="MissingHandler", message="no handler"):
    return ValidationIssue(location, kind, message)


def test_issue_str_format():
    issue = _issue()
    assert str(issue) == "[MissingHandler] /pets → GET: no handler"


def test_fail_if_issues_raises_with_all_issues():
    issues = [_issue(), _issue(location="/users → POST", kind="InvalidRequestSchema")]
    with pytest.raises(SpecValidationError) as excinfo:
        fail_if_issues(issues)
    assert excinfo.value.issues == tuple(issues)


def test_fail_if_issues_message_lists_each_issue():
    issues = [_issue(), _issue(location="/users → POST", message="bad body")]
    with pytest.raises(SpecValidationError) as excinfo:
        fail_if_issues(iter(issues))
    text = str(excinfo.value)
    assert text.splitlines() == [str(i) for i in issues]


def test_fail_if_issues_accepts_empty():
    assert fail_if_issues([]) is None


def test_print_issues_reports_count_and_lines(capsys):
    issues = [_issue(), _issue(kind="InvalidResponseSchema", message="missing type")]
    print_issues(issues)
    err = capsys.readouterr().err
    assert "2 issue(s) found" in err
    for issue in issues:
        assert str(issue) in err


def test_spec_validation_error_is_value_error():
    with pytest.raises(ValueError):
        fail_if_issues([_issue()])