import urllib.parse

from clickatell_client.command import Command, DEFAULT_SERVICE_HOST


def test_builds_encoded_url_for_command_and_params():
    url = Command("cmdname").with_params({"param_one": "abc", "param_two": "123"})
    assert url == "http://api.clickatell.com/http/cmdname?param_one=abc&param_two=123"


def test_url_encodes_special_characters():
    url = Command("cmdname").with_params({
        "param_one": "abc",
        "param_two": "hello world & goodbye cruel world <grin>",
    })
    assert url == (
        "http://api.clickatell.com/http/cmdname"
        "?param_one=abc&param_two=hello+world+%26+goodbye+cruel+world+%3Cgrin%3E"
    )


def test_query_decodes_back_to_original_pairs_in_order():
    params = {"to": "447700900123,447700900124", "text": "50% off: a/b?c=d#e", "concat": 2}
    url = Command("sendmsg").with_params(params)

    query = urllib.parse.urlsplit(url).query
    assert "%2C" in query
    assert "+off%3A+" in query
    assert urllib.parse.parse_qsl(query) == [(k, str(v)) for k, v in params.items()]


def test_uses_custom_host_when_set():
    url = Command("cmdname", host="api.clickatell-custom.co.uk").with_params({"param_one": "abc"})
    assert url == "http://api.clickatell-custom.co.uk/http/cmdname?param_one=abc"


def test_falls_back_to_default_host_for_none_or_empty():
    for host in (None, ""):
        command = Command("cmdname", host=host)
        assert command.effective_host == DEFAULT_SERVICE_HOST
        assert command.with_params({"a": "1"}) == "http://api.clickatell.com/http/cmdname?a=1"


def test_secure_command_uses_https():
    url = Command("cmdname", "http", secure=True).with_params({"param_one": "abc", "param_two": "123"})
    assert url == "https://api.clickatell.com/http/cmdname?param_one=abc&param_two=123"


def test_no_params_gives_empty_query():
    assert Command("getbalance").with_params({}) == "http://api.clickatell.com/http/getbalance"
