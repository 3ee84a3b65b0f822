import textwrap

from routeaudit.rules.engine import analyze, evaluate
from routeaudit.rules.outcomes import Mismatch, NotApplicable, Unverifiable, Verified
from routeaudit.syntax.model import MethodUnit
from routeaudit.syntax.python_ast import extract_methods_from_source


def client_method(decorator: str, body: str) -> MethodUnit:
    src = (
        "class IssueEventsClient:\n"
        f"    {decorator}\n"
        "    def get_all_for_repository(self, owner, name):\n"
        + textwrap.indent(textwrap.dedent(body).strip("\n"), " " * 8)
        + "\n"
    )
    methods = extract_methods_from_source(src, path="issue_events.py")
    assert len(methods) == 1
    return methods[0]


HAPPY_BODY = """
ensure.argument_not_null_or_empty(owner, "owner")
ensure.argument_not_null_or_empty(name, "name")

uri = "repos/{0}/{1}/issues/events".format(owner, name)

return self.connection.get_all(uri)
"""


def test_no_annotations_is_not_applicable():
    src = textwrap.dedent(
        """
        def helper(owner):
            uri = "repos/{0}".format(owner)
            return uri
        """
    )
    m = extract_methods_from_source(src)[0]
    assert isinstance(evaluate(m), NotApplicable)
    assert analyze(m) is None


def test_empty_source_has_nothing_to_analyze():
    assert extract_methods_from_source("") == []


def test_matching_template_is_verified():
    m = client_method('@endpoint("repos/:owner/:repo/issues/events")', HAPPY_BODY)
    assert isinstance(evaluate(m), Verified)
    assert analyze(m) is None


def test_inline_request_path_is_unverifiable():
    m = client_method(
        '@endpoint("repos/:owner/:repo/issues/events")',
        """
        ensure.argument_not_null_or_empty(owner, "owner")
        return self.connection.get_all("repos/{0}/{1}/issues/events".format(owner, name))
        """,
    )
    outcome = evaluate(m)
    assert isinstance(outcome, Unverifiable)
    assert outcome.method_name == "get_all_for_repository"

    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA001"
    assert d.name == "endpoint-unverifiable"
    assert d.severity == "warning"
    assert d.message == "Method 'get_all_for_repository' does not assign a local `uri` to audit."
    assert d.args == ("get_all_for_repository",)


def test_helper_built_url_is_unverifiable():
    m = client_method(
        '@endpoint("repos/:owner/:repo/issues/events")',
        """
        return self.connection.get_all(api_urls.issues_events(owner, name))
        """,
    )
    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA001"


def test_different_resource_is_a_mismatch():
    m = client_method('@endpoint("repos/:owner/:repo/events")', HAPPY_BODY)

    outcome = evaluate(m)
    assert isinstance(outcome, Mismatch)
    assert outcome.declared_template == '"repos/:owner/:repo/events"'
    assert outcome.actual_literal == '"repos/{0}/{1}/issues/events"'

    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA002"
    assert d.name == "endpoint-mismatch"
    assert d.message == (
        "Method 'get_all_for_repository' declares it consumes 'repos/:owner/:repo/events' "
        "but actually uses 'repos/{0}/{1}/issues/events'"
    )
    assert d.args == ("get_all_for_repository", "repos/:owner/:repo/events", "repos/{0}/{1}/issues/events")


def test_quote_style_must_match_exactly():
    m = client_method(
        "@endpoint('repos/:owner/:repo/issues/events')",
        HAPPY_BODY,
    )
    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA002"
    # message arguments are shown without quotes
    assert d.args[1] == "repos/:owner/:repo/issues/events"


def test_diagnostic_points_at_method_identifier():
    m = client_method('@endpoint("repos/:owner/:repo/events")', HAPPY_BODY)
    d = analyze(m)
    assert d is not None
    assert d.location.path == "issue_events.py"
    assert d.location.line == 3
    assert d.location.column == 9


def test_later_uri_declaration_does_not_change_outcome():
    m = client_method(
        '@endpoint("repos/:owner/:repo/issues/events")',
        """
        uri = "repos/{0}/{1}/issues/events".format(owner, name)
        result = self.connection.get_all(uri)
        uri = "totally/{0}/different".format(owner)
        return result
        """,
    )
    assert analyze(m) is None


def test_declared_template_without_placeholders():
    m = client_method(
        '@endpoint("user/repos")',
        """
        uri = "user/repos".format()
        return self.connection.get_all(uri)
        """,
    )
    assert analyze(m) is None


def test_async_methods_are_checked():
    src = textwrap.dedent(
        """
        class GistsClient:
            @endpoint("gists/:id")
            async def get(self, id):
                uri = "gist/{0}".format(id)
                return await self.connection.get(uri)
        """
    )
    m = extract_methods_from_source(src)[0]
    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA002"
    assert d.method_name == "get"


def test_each_method_is_evaluated_independently():
    src = textwrap.dedent(
        """
        class ReposClient:
            @endpoint("repos/:owner/:repo")
            def get(self, owner, name):
                uri = "repos/{0}/{1}".format(owner, name)
                return self.connection.get(uri)

            @endpoint("repos/:owner/:repo/forks")
            def get_forks(self, owner, name):
                return self.connection.get(forks_url(owner, name))

            def _helper(self):
                pass
        """
    )
    outcomes = [evaluate(m) for m in extract_methods_from_source(src)]
    assert [type(o) for o in outcomes] == [Verified, Unverifiable, NotApplicable]


def test_implicitly_concatenated_uri_is_unverifiable():
    m = client_method(
        '@endpoint("repos/:owner/:repo/issues/events")',
        """
        uri = ("repos/{0}/{1}/" "issues/events").format(owner, name)
        return self.connection.get_all(uri)
        """,
    )
    d = analyze(m)
    assert d is not None
    assert d.rule_id == "RA001"
