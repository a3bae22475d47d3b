"""Tests for HTTP status mapping."""

import pytest
from httpx import Response

from wikiapi_core.errors.exceptions import ActionFailure, ClientError, ServerError, TransportFault
from wikiapi_core.errors.handler import raise_for_status


@pytest.mark.unit
def test_raise_for_status_success_response():
    """Test raise_for_status doesn't raise for successful responses."""
    response = Response(status_code=200, text="<api />")

    # Should not raise
    raise_for_status(response)


@pytest.mark.unit
def test_raise_for_status_200_with_error_body():
    """Server errors inside a 200 body are left to the parser."""
    raise_for_status(Response(status_code=200, text='<api><error code="x" info="y" /></api>'))


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [400, 403, 404, 414])
def test_raise_for_status_4xx(status_code):
    """Test raise_for_status raises ClientError for 4xx."""
    response = Response(status_code=status_code, text="Nope")

    with pytest.raises(ClientError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.response is response
    assert str(status_code) in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [500, 502, 503])
def test_raise_for_status_5xx(status_code):
    """Test raise_for_status raises ServerError for 5xx."""
    with pytest.raises(ServerError) as exc_info:
        raise_for_status(Response(status_code=status_code, text="Database error"))

    assert exc_info.value.status_code == status_code


@pytest.mark.unit
def test_raise_for_status_other_codes():
    """Unexpected non-success codes raise a plain TransportFault."""
    with pytest.raises(TransportFault) as exc_info:
        raise_for_status(Response(status_code=304))

    assert type(exc_info.value) is TransportFault
    assert str(exc_info.value) == "HTTP 304"


@pytest.mark.unit
def test_raise_for_status_truncates_body():
    """Only the start of a long body ends up in the message."""
    with pytest.raises(ServerError) as exc_info:
        raise_for_status(Response(status_code=500, text="x" * 1000))

    assert str(exc_info.value) == "HTTP 500: " + "x" * 200


@pytest.mark.unit
def test_transport_faults_are_action_failures():
    """Callers can catch every fatal action error in one place."""
    with pytest.raises(ActionFailure):
        raise_for_status(Response(status_code=502))
