"""Dispatch of matched routes to handlers running on worker threads."""

from __future__ import annotations

import json
import queue
import sys
import threading
from dataclasses import MISSING, asdict, dataclass, field, fields, is_dataclass
from typing import Any, Callable

from .router import RouteMatch
from .typed import TypedHandlerRequest

_STOP = object()
_NO_REPLY = object()

_SCALAR_TYPES: dict[str, type] = {"bool": bool, "int": int, "float": float, "str": str}


@dataclass
class HandlerResponse:
    """Status code and JSON body produced by a handler."""

    status: int
    body: Any


@dataclass
class HandlerRequest:
    """A request handed to a handler, with the queue its reply goes to."""

    method: str
    path: str
    handler_name: str
    path_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    body: Any = None
    reply_to: queue.Queue = field(default_factory=queue.Queue, repr=False, compare=False)


def _resolve_hint(hint: Any) -> Any:
    if isinstance(hint, str):
        return _SCALAR_TYPES.get(hint.strip())
    return hint


def _check_type(name: str, value: Any, hint: Any) -> None:
    hint = _resolve_hint(hint)
    if hint is bool:
        ok = isinstance(value, bool)
    elif hint is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif hint is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    elif hint is str:
        ok = isinstance(value, str)
    else:
        return
    if not ok:
        raise ValueError(
            f"invalid type for field `{name}`: expected {hint.__name__}, "
            f"got {type(value).__name__}"
        )


def _decode_body(request_type: Any, data: Any) -> Any:
    if not (is_dataclass(request_type) and isinstance(request_type, type)):
        return request_type(data)
    if not isinstance(data, dict):
        raise ValueError(f"expected an object for {request_type.__name__}")
    kwargs: dict[str, Any] = {}
    for item in fields(request_type):
        if not item.init:
            continue
        if item.name in data:
            value = data[item.name]
            _check_type(item.name, value, item.type)
            kwargs[item.name] = value
        elif item.default is MISSING and item.default_factory is MISSING:
            raise ValueError(f"missing field `{item.name}`")
    return request_type(**kwargs)


def _to_json_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return {"error": "Failed to serialize response"}
    return value


class Dispatcher:
    """Routes requests by handler name to worker threads and waits for replies."""

    def __init__(self) -> None:
        self.handlers: dict[str, queue.Queue] = {}
        self._threads: dict[str, threading.Thread] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _start(self, name: str, process: Callable[[HandlerRequest], None]) -> None:
        inbox: queue.Queue = queue.Queue()

        def serve() -> None:
            for req in iter(inbox.get, _STOP):
                try:
                    process(req)
                finally:
                    req.reply_to.put(_NO_REPLY)

        thread = threading.Thread(target=serve, name=f"handler-{name}", daemon=True)
        thread.start()
        with self._lock:
            previous = self.handlers.get(name)
            if previous is not None:
                previous.put(_STOP)
            self.handlers[name] = inbox
            self._threads[name] = thread

    def register_handler(self, name: str, handler_fn: Callable[[HandlerRequest], None]) -> None:
        """Run ``handler_fn`` for every request dispatched to ``name``.

        The handler replies by putting a :class:`HandlerResponse` on the
        request's ``reply_to`` queue. An exception becomes a 500 reply.
        """

        def process(req: HandlerRequest) -> None:
            try:
                handler_fn(req)
            except Exception as exc:  # noqa: BLE001 - handler failures become replies
                req.reply_to.put(
                    HandlerResponse(
                        status=500,
                        body={"error": "Handler panicked", "details": repr(exc)},
                    )
                )
                print(f"Handler '{req.handler_name}' panicked: {exc!r}", file=sys.stderr)

        self._start(name, process)

    def register_typed(
        self,
        name: str,
        handler_fn: Callable[[TypedHandlerRequest[Any]], Any],
        request_type: Any,
    ) -> None:
        """Register a handler whose body is decoded into ``request_type``.

        The value the handler returns is sent back with status 200.
        """

        def process(req: HandlerRequest) -> None:
            if req.body is None:
                req.reply_to.put(
                    HandlerResponse(status=400, body={"error": "Missing request body"})
                )
                return
            try:
                data = _decode_body(request_type, req.body)
            except (TypeError, ValueError, KeyError) as err:
                req.reply_to.put(
                    HandlerResponse(
                        status=400,
                        body={"error": "Invalid request body", "message": str(err)},
                    )
                )
                return
            typed_req = TypedHandlerRequest(
                method=req.method,
                path=req.path,
                handler_name=req.handler_name,
                path_params=req.path_params,
                query_params=req.query_params,
                data=data,
            )
            try:
                result = handler_fn(typed_req)
            except Exception as exc:  # noqa: BLE001 - a failed handler sends no reply
                print(f"Handler '{req.handler_name}' failed: {exc!r}", file=sys.stderr)
                return
            req.reply_to.put(HandlerResponse(status=200, body=_to_json_value(result)))

        self._start(name, process)

    def dispatch(self, route_match: RouteMatch, body: Any) -> HandlerResponse | None:
        """Send the match to its handler and wait for the reply.

        Returns None if no handler is registered or the handler sent no reply.
        """
        with self._lock:
            inbox = self.handlers.get(route_match.handler_name)
        if inbox is None:
            return None
        request = HandlerRequest(
            method=route_match.route.method,
            path=route_match.route.path_pattern,
            handler_name=route_match.handler_name,
            path_params=dict(route_match.path_params),
            query_params=dict(route_match.query_params),
            body=body,
        )
        inbox.put(request)
        reply = request.reply_to.get()
        return None if reply is _NO_REPLY else reply

    def close(self) -> None:
        """Stop every handler thread and forget all registrations."""
        with self._lock:
            inboxes = list(self.handlers.values())
            threads = list(self._threads.values())
            self.handlers.clear()
            self._threads.clear()
        for inbox in inboxes:
            inbox.put(_STOP)
        for thread in threads:
            thread.join()


def echo_handler(req: HandlerRequest) -> None:
    """Reply with a description of the request itself."""
    req.reply_to.put(
        HandlerResponse(
            status=200,
            body={
                "handler": req.handler_name,
                "method": req.method,
                "path": req.path,
                "params": req.path_params,
                "query": req.query_params,
                "body": req.body,
            },
        )
    )