from memecoin.responses import Response, empty, error, ok


def test_empty_has_empty_object_data():
    assert empty().to_dict() == {"code": 0, "msg": "ok", "data": {}}


def test_ok_carries_data():
    assert ok({"key": "value"}).to_dict() == {"code": 0, "msg": "ok", "data": {"key": "value"}}


def test_ok_without_data_omits_it():
    assert "data" not in ok(None).to_dict()


def test_error_omits_data():
    assert error(100, "error message").to_dict() == {"code": 100, "msg": "error message"}


def test_to_stores_status_and_body():
    context = {}
    response = ok({"id": "1"})
    response.to(context, 200)
    assert context["resp_status"] == 200
    assert context["resp_body"] is response


def test_responses_compare_by_value():
    assert Response(0, "ok", {"a": 1}) == ok({"a": 1})