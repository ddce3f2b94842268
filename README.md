# oasroute

`oasroute` turns an OpenAPI 3.1 document into a request router. It reads the
paths and operations of a spec and builds a table of routes, matches incoming
requests against that table, and hands each one to a named handler running on
its own worker thread. It can also describe the fields of request and response
schemas for use in handler stubs.

## Modules

### `oasroute.spec`

- `load_spec(file_path, verbose=False)` reads a spec file and returns a list of
  `RouteMeta`. Files ending in `.yaml` or `.yml` are read as YAML, anything
  else as JSON.
- `load_spec_from_spec(spec, verbose=False)` and `build_routes(spec, verbose=False)`
  do the same for a spec that is already parsed into a mapping.
- Paths are visited in sorted order, and within a path the methods in the order
  GET, PUT, POST, DELETE, OPTIONS, HEAD, PATCH, TRACE.
- Each `RouteMeta` holds `method` (upper case), `path_pattern`, `handler_name`,
  `parameters` (always empty), `request_schema` and `response_schema`.
- The handler name is the value of the first `x-handler*` key of the
  operation, taking keys in sorted order. If there is none, the `operationId`
  is used.
- The request schema comes from the `application/json` content of
  `requestBody`. The response schema comes from the `application/json` content
  of the `200` response. A `$ref` to `#/components/schemas/...` is resolved.
- With `verbose=True` each route is printed to standard error.

Problems are collected while routes are built, and a `SpecValidationError` is
raised at the end if there are any. These problems are:

- an operation with no handler name;
- a request body without `application/json` content;
- an inline request or response schema without a `type`.

### `oasroute.validator`

- `ValidationIssue(location, kind, message)` describes one problem. Its string
  form is `[kind] location: message`.
- `SpecValidationError` is a `ValueError` whose `issues` attribute holds the
  issues.
- `fail_if_issues(issues)` raises `SpecValidationError` when `issues` is not
  empty.
- `print_issues(issues)` writes a readable report to standard error.

### `oasroute.router`

- `Router(routes)` compiles each path pattern, such as `/zoo/animals/{id}`.
  Each `{name}` segment matches one path segment.
- `Router.route(method, path)` returns a `RouteMatch` for the first route with
  that method (case-insensitive) whose pattern matches the whole path.
  `RouteMatch` holds `route`, `path_params`, `handler_name` and
  `query_params`, which starts empty. It returns `None` when nothing matches.

### `oasroute.dispatcher`

A `Dispatcher` keeps one worker thread per registered handler name.
Registering a name again replaces the earlier handler.

- `register_handler(name, handler_fn)` registers a plain handler. It receives
  a `HandlerRequest` (`method`, `path`, `handler_name`, `path_params`,
  `query_params`, `body`, `reply_to`) and replies by putting a
  `HandlerResponse(status, body)` on `req.reply_to`. A handler that raises is
  answered with status 500 and
  `{"error": "Handler panicked", "details": ...}`.
- `register_typed(name, handler_fn, request_type)` registers a handler whose
  JSON body is first converted into `request_type`.
  - For a dataclass, fields are taken from the JSON object by name. `bool`,
    `int`, `float` and `str` fields are type-checked, and missing required
    fields are rejected.
  - Any other `request_type` is called with the body.
  - A missing body is answered with status 400 and
    `{"error": "Missing request body"}`. A body that cannot be converted is
    answered with status 400 and `{"error": "Invalid request body", "message": ...}`.
  - The handler receives a `TypedHandlerRequest`. Its return value is sent
    back with status 200, with dataclasses converted to dictionaries. A value
    that cannot be turned into JSON becomes
    `{"error": "Failed to serialize response"}`.
- `dispatch(route_match, body)` sends the request to its handler and waits for
  the reply. It returns `None` if no handler is registered under that name or
  if the handler sent no reply.
- `close()` stops all workers and forgets all registrations. A `Dispatcher` is
  also a context manager that closes on exit.
- `echo_handler(req)` replies with status 200 and a description of the
  request: handler, method, path, params, query and body.

### `oasroute.typed`

- `TypedHandlerRequest` and `TypedHandlerResponse` are the typed request and
  response wrappers.
- `CreatePetRequest`, `CreatePetResponse` and `create_pet_handler` form a
  sample typed handler. It answers with the id `pet_1234` and the given name.

### `oasroute.server`

- `AppService(router, dispatcher).call(method, path, body=None)` handles one
  request and returns `(status, reason, json_bytes)`.
  - It splits the query string off the path into `query_params` and parses the
    body as JSON. A body that is not valid JSON becomes `None`.
  - When no route matches, it answers 404 with
    `{"error": "Not Found", "method": ..., "path": ...}`.
  - When no reply comes back, it answers 500 with
    `{"error": "Handler failed or not registered", ...}`.
  - Otherwise it answers with the handler's status, the reason phrase `OK`,
    and the handler's body as compact JSON with sorted keys.
- `make_server(service, host="0.0.0.0", port=8080)` returns a
  `ThreadingHTTPServer` that answers every method (GET, POST, PUT, PATCH,
  DELETE, HEAD, OPTIONS, TRACE) through the service with
  `Content-Type: application/json`.

### `oasroute.generator` and `oasroute.dummy_value`

- `extract_fields(schema)` turns a JSON schema into a list of `FieldDef`
  (`name`, `ty`, `optional`, `value`), sorted by property name.
  - `string`, `integer`, `number` and `boolean` map to `String`, `i32`, `f64`
    and `bool`.
  - Arrays map to `Vec<Name>` for referenced items, or `Vec<Value>` otherwise.
  - `$ref` properties map to the component name.
  - Everything else maps to `serde_json::Value`.
  - An array schema with a referenced item type yields a single `items` field.
- `dummy_value(ty)` gives the placeholder value expression for such a type.
- `collect_imports(fields)` returns the sorted, distinct named types that the
  fields refer to. `is_named_type(ty)` tells whether a type name counts as
  one.
- `process_schema_type(schema, schema_types)` records a `TypeDefinition` for a
  `$ref` schema not yet in `schema_types`. `RegistryEntry` names a handler.

## Example

```python
from oasroute.spec import load_spec
from oasroute.router import Router
from oasroute.dispatcher import Dispatcher, echo_handler
from oasroute.server import AppService, make_server

routes = load_spec("openapi.yaml", False)
router = Router(routes)

dispatcher = Dispatcher()
for route in routes:
    dispatcher.register_handler(route.handler_name, echo_handler)

match = router.route("GET", "/zoo/animals/123")
if match is not None:
    print(match.handler_name, match.path_params)   # e.g. get_animal {'id': '123'}
    response = dispatcher.dispatch(match, None)
    print(response.status, response.body)

service = AppService(router, dispatcher)
server = make_server(service, "127.0.0.1", 8080)
try:
    server.serve_forever()
finally:
    dispatcher.close()
```

A typed handler:

```python
from oasroute.dispatcher import Dispatcher
from oasroute.typed import CreatePetRequest, create_pet_handler

dispatcher = Dispatcher()
dispatcher.register_typed("add_pet", create_pet_handler, CreatePetRequest)
```

A request routed to `add_pet` with the body `{"name": "Rex"}` is answered with
status 200 and `{"id": "pet_1234", "name": "Rex"}`.

## What it does not do

- There is no command-line tool. Servers are started from your own code with
  `make_server`.
- The generator helpers only describe fields and types. Nothing in the package
  renders or writes handler, controller or registry source files.
- No handlers are registered for you. Every handler name from the spec must be
  registered on the `Dispatcher`, or requests to it are answered with 500.
- Operation `parameters` are not read from the spec.

## Requirements

Python 3.11 or later and PyYAML.