"""Handler argument binding and problem responses."""

import asyncio
import json
from typing import Annotated

import pytest

from requestdto import (
    FromRequest,
    JSONResponse,
    LogicError,
    Request,
    RequestDtoResolver,
    bind_arguments,
    request_dto,
)
from tests.dto import ItemModel, QueryDtoWithAttribute, TestDto


def test_bind_arguments_mixes_sources(resolver, full_payload) -> None:
    def create(
        request: Request,
        dto: Annotated[TestDto, FromRequest()],
        user_id: int,
        dry_run: bool = False,
    ) -> None:
        pass

    request = Request("POST", body=json.dumps(full_payload).encode())
    kwargs = bind_arguments(create, request, resolver, extra={"user_id": 4})
    assert kwargs["request"] is request
    assert kwargs["dto"].string == "foobar"
    assert kwargs["user_id"] == 4
    assert kwargs["dry_run"] is False


def test_bind_arguments_missing_value(resolver) -> None:
    def handler(user_id: int) -> None:
        pass

    with pytest.raises(LogicError):
        bind_arguments(handler, Request(), resolver)


def test_request_dto_decorator_success() -> None:
    @request_dto()
    def list_items(query: QueryDtoWithAttribute) -> dict:
        return {"page": query.page, "search": query.search}

    assert list_items(Request("GET", url="/items?page=3&search=pen")) == {
        "page": 3,
        "search": "pen",
    }


def test_request_dto_decorator_problem_response() -> None:
    @request_dto(RequestDtoResolver())
    def create_item(item: ItemModel) -> dict:
        return {"name": item.name}

    response = create_item(Request("POST", body=b'{"name": "pen", "qty": "two"}'))
    assert isinstance(response, JSONResponse)
    status, body, headers = response.serialize()
    assert status == 400
    assert headers["content-type"] == "application/problem+json"
    problem = json.loads(body)
    assert problem["status"] == 400
    assert problem["title"] == "Type mismatch"
    assert problem["errors"][0]["loc"] == ["body", "qty"]
    assert problem["errors"][0]["expected"] == ["int"]
    assert problem["errors"][0]["actual"] == "str"
    assert problem["errors"][0]["input"] == "two"


def test_request_dto_decorator_forwards_extra() -> None:
    @request_dto()
    def update_item(item_id: int, item: ItemModel) -> tuple:
        return item_id, item.qty

    request = Request("PUT", body=b'{"name": "pen", "qty": 5}')
    assert update_item(request, item_id=9) == (9, 5)


def test_request_dto_decorator_async_handler() -> None:
    @request_dto()
    async def create_item(item: ItemModel) -> str:
        return item.name

    request = Request("POST", body=b'{"name": "cup", "qty": 1}')
    assert asyncio.run(create_item(request)) == "cup"

    bad = Request("POST", body=b'{"name": "", "qty": 1}')
    response = asyncio.run(create_item(bad))
    assert response.status_code == 400
    assert response.json()["title"] == "Validation Failed"


def test_problem_response_for_over_long_number() -> None:
    @request_dto()
    def create(dto: Annotated[TestDto, FromRequest()]) -> str:
        return dto.string

    body = b'{"int": 5, "float": ' + b"9" * 5000 + b', "string": "x", "bool": true}'
    response = create(Request("POST", body=body))
    assert response.status_code == 400
    assert response.json()["status"] == 400
