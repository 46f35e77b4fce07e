"""Unit tests for the layered-architecture rule (archcheck)."""

import unittest

from godolint.domain.config import ConfigurationLoader
from godolint.domain.diagnostics import apply_fixes
from godolint.domain.rules.architecture import is_returned_error
from godolint.domain.rules.golang import is_wrap_call
from tests.go_test_utils import findings_of, go_source, messages_of, parse_go, run_rules

DOMAIN_TASK = """
package {package}

type Task struct {{
    ID        string
    CreatedAt int64
}}
"""

VALIDATE_POINTER = """
package domain

func (t *Task) Validate() error {
    return nil
}
"""

VALIDATE_VALUE = """
package domain

func (t Task) Validate() error {
    return nil
}
"""


def _arch(source: str, path: str = "internal/app/app.go", **kwargs) -> list[str]:
    return messages_of(run_rules(source, "archcheck", path=path, **kwargs), "archcheck")


class TestDomainTypes(unittest.TestCase):
    """Tests for domain struct placement and validation."""

    def test_domain_type_outside_domain_package(self) -> None:
        """ID plus CreatedAt outside a domain package breaks both conditions."""
        self.assertEqual(
            _arch(DOMAIN_TASK.format(package="storage"), path="internal/storage/task.go"),
            [
                "domain type Task must be defined in a domain package",
                "domain type Task must have a pointer-receiver Validate method",
            ],
        )

    def test_domain_type_with_pointer_validate_is_clean(self) -> None:
        """A domain package plus (*Task).Validate satisfies the rule."""
        messages = _arch(
            DOMAIN_TASK.format(package="domain"),
            path="internal/domain/task.go",
            siblings={"internal/domain/validate.go": VALIDATE_POINTER},
        )
        self.assertEqual(messages, [])

    def test_value_receiver_validate_is_not_enough(self) -> None:
        """Validate must take a pointer receiver."""
        messages = _arch(
            DOMAIN_TASK.format(package="domain"),
            path="internal/domain/task.go",
            siblings={"internal/domain/validate.go": VALIDATE_VALUE},
        )
        self.assertEqual(messages, ["domain type Task must have a pointer-receiver Validate method"])

    def test_struct_without_timestamps_is_not_domain(self) -> None:
        """ID alone does not make a domain type."""
        source = """
        package storage

        type Row struct {
            ID string
        }
        """
        self.assertEqual(_arch(source, path="internal/storage/row.go"), [])

    def test_unknown_package_is_not_a_violation(self) -> None:
        """Without module or directory the package check is skipped."""
        messages = _arch(DOMAIN_TASK.format(package="main"), path="main.go", module="")
        self.assertEqual(messages, ["domain type Task must have a pointer-receiver Validate method"])


class TestInterfacesAndStorage(unittest.TestCase):
    """Tests for interface and storage type checks."""

    def test_interface_limit_and_suffix(self) -> None:
        """Too many methods and a bad name are separate diagnostics."""
        source = """
        package app

        type TaskAPI interface {
            A()
            B()
            C()
            D()
            E()
            F()
        }
        """
        self.assertEqual(
            _arch(source),
            [
                "interface TaskAPI must declare at most 5 methods",
                "interface TaskAPI name must end with 'er' or 'Service'",
            ],
        )

    def test_storage_interface_without_errors_or_transactions(self) -> None:
        """A *Store type needs an Error reference and BeginTx."""
        source = """
        package storage

        type TaskStore interface {
            Get(id string) string
        }
        """
        messages = _arch(source, path="internal/storage/store.go")
        self.assertIn("storage type TaskStore should use domain error wrapping", messages)
        self.assertIn("storage type TaskStore should support transactions (BeginTx)", messages)

    def test_storage_struct_with_methods(self) -> None:
        """A Repository covering the Store contract with a domain error is clean."""
        source = """
        package storage

        import "example.com/todo/internal/domain"

        type TaskRepository struct {
            lastErr *domain.Error
        }

        func (r *TaskRepository) BeginTx() {}

        func (r *TaskRepository) Close() {}
        """
        self.assertEqual(_arch(source, path="internal/storage/repo.go"), [])


class TestErrorWrapping(unittest.TestCase):
    """Tests for the return-wrapping check."""

    def test_returned_err_is_flagged_with_fix(self) -> None:
        """return err is rewritten to fmt.Errorf with the function name."""
        source = """
        package app

        func Load() error {
            err := fetch()
            return err
        }
        """
        content = go_source(source)
        findings = findings_of(run_rules(source, "archcheck"), "archcheck")
        self.assertEqual([d.message for d in findings], ["errors should be wrapped with context before returning"])
        self.assertEqual(findings[0].fixes[0].message, "Wrap error with context")
        fixed = apply_fixes(content, findings[0].fixes).decode()
        self.assertIn('return fmt.Errorf("Load: %w", err)', fixed)

    def test_wrapped_error_is_clean(self) -> None:
        """A call around the error is not a bare return."""
        source = """
        package app

        func Load() error {
            err := fetch()
            return errors.Wrap(err, "load")
        }
        """
        self.assertEqual(_arch(source), [])

    def test_returned_error_names(self) -> None:
        """err and names ending in Error count; other identifiers do not."""
        tree = parse_go("package app\n\nvar a, validationError, errCount = err, x, y\n")
        names = {n.text: is_returned_error(n) for n in tree.nodes if n.type == "identifier"}
        self.assertTrue(names["err"])
        self.assertTrue(names["validationError"])
        self.assertFalse(names["errCount"])

    def test_parenthesised_err_is_flagged(self) -> None:
        """return (err) is still a bare error."""
        source = """
        package app

        func Load() error {
            err := fetch()
            return (err)
        }
        """
        self.assertEqual(_arch(source), ["errors should be wrapped with context before returning"])

    def test_closure_return_names_enclosing_function(self) -> None:
        """A return inside a func literal is wrapped with the declared function's name."""
        source = """
        package app

        func Load() func() error {
            return func() error {
                err := fetch()
                return err
            }
        }
        """
        content = go_source(source)
        findings = findings_of(run_rules(source, "archcheck"), "archcheck")
        self.assertEqual(len(findings), 1)
        self.assertIn('fmt.Errorf("Load: %w", err)', apply_fixes(content, findings[0].fixes).decode())

    def test_wrap_call_names(self) -> None:
        """Wrap, Wrap* and WithStack calls add context; fmt.Errorf is not one of them."""
        tree = parse_go(
            "package app\n\nvar a, b, c, d = errors.Wrapf(err, \"x\"), pkg.WrapWithCode(err, 1), "
            "errors.WithStack(err), fmt.Errorf(\"x\")\n"
        )
        calls = sorted((n for n in tree.nodes if n.type == "call_expression"), key=lambda n: n.start)
        self.assertEqual([is_wrap_call(c) for c in calls], [True, True, True, False])


class TestLayerImports(unittest.TestCase):
    """Tests for layer import boundaries."""

    def test_api_must_not_import_storage(self) -> None:
        """The default rules forbid internal/api -> internal/storage."""
        source = """
        package api

        import "example.com/todo/internal/storage"
        """
        self.assertEqual(
            _arch(source, path="internal/api/handler.go"),
            ["api layer cannot depend on storage layer"],
        )

    def test_allowed_import_is_clean(self) -> None:
        """internal/api may import internal/domain."""
        source = """
        package api

        import "example.com/todo/internal/domain"
        """
        self.assertEqual(_arch(source, path="internal/api/handler.go"), [])

    def test_custom_layers(self) -> None:
        """layers in the configuration replace the defaults."""
        config = ConfigurationLoader({"layers": {"internal/domain": ["internal/api"]}})
        source = """
        package domain

        import "example.com/todo/internal/api"
        """
        self.assertEqual(
            _arch(source, path="internal/domain/task.go", config=config),
            ["domain layer cannot depend on api layer"],
        )


DTO_MESSAGE = "api layer should use DTOs for request/response"


class TestLayerPackages:
    """Conventions checked per layer package directory."""

    def test_handler_importing_storage(self) -> None:
        """A handler file importing storage without a service dependency."""
        source = """
        package handler

        import (
            "net/http"

            "example.com/todo/internal/storage"
        )

        func GetTask(w http.ResponseWriter, r *http.Request) {
            storage.Load()
        }
        """
        assert _arch(source, path="internal/api/handler/task.go") == [
            "api layer cannot depend on storage layer",
            "handlers should not import storage directly, use service layer instead",
            "handlers should depend on service interfaces",
            DTO_MESSAGE,
        ]

    def test_handler_using_service_and_dto(self) -> None:
        """A handler that talks to a *Service and returns a *Response is clean."""
        source = """
        package handler

        import "net/http"

        type TaskService interface {
            Get(id string) (*TaskResponse, error)
        }

        type TaskResponse struct {
            Title string
        }

        type TaskHandler struct {
            tasks TaskService
        }

        func (h *TaskHandler) GetTask(w http.ResponseWriter, r *http.Request) {
            var service TaskService = h.tasks
            var resp *TaskResponse
            resp, _ = service.Get(r.URL.Path)
            _ = resp
        }
        """
        assert _arch(source, path="internal/api/handler/task.go") == []

    def test_middleware_with_state_or_wrong_signature(self) -> None:
        """Pointer receivers are stateful; a non-handler result breaks the interface."""
        source = """
        package middleware

        import "net/http"

        type Logger struct {
            count int
        }

        func (l *Logger) Wrap(next http.Handler) http.Handler {
            return next
        }

        func Trace(next http.Handler) string {
            return ""
        }
        """
        assert _arch(source, path="internal/api/middleware/logging.go") == [
            "middleware should be stateless",
            DTO_MESSAGE,
            "middleware must implement standard middleware interface",
            DTO_MESSAGE,
        ]

    def test_middleware_standard_signatures(self) -> None:
        """http.Handler and a named http.HandlerFunc result both satisfy the interface."""
        source = """
        package middleware

        import "net/http"

        func Logging(next http.Handler) http.Handler {
            return next
        }

        func Recover(next http.HandlerFunc) (h http.HandlerFunc) {
            return next
        }
        """
        assert _arch(source, path="internal/api/middleware/chain.go") == [DTO_MESSAGE, DTO_MESSAGE]

    def test_storage_types_outside_store_contract(self) -> None:
        """A non-Store interface and a struct without BeginTx/Close are both reported."""
        source = """
        package storage

        type TaskReader interface {
            Get(id string) string
        }

        type Memory struct {
            rows map[string]string
        }

        func (m *Memory) Get(id string) string {
            return m.rows[id]
        }
        """
        assert _arch(source, path="internal/storage/memory.go") == [
            "storage types must implement Store interface",
            "storage operations should use transactions",
            "storage types must implement Store interface",
            "storage operations should use transactions",
        ]

    def test_storage_struct_with_store_contract(self) -> None:
        """BeginTx plus Close on the pointer is enough; unexported helpers are skipped."""
        source = """
        package storage

        type Memory struct {
            rows map[string]string
        }

        func (m *Memory) BeginTx() error {
            return nil
        }

        func (m *Memory) Close() error {
            return nil
        }

        type row struct {
            id string
        }
        """
        assert _arch(source, path="internal/storage/memory.go") == []

    def test_service_holding_storage_implementation(self) -> None:
        """A concrete storage type in a service, and a method without branching."""
        source = """
        package service

        import "example.com/todo/internal/storage"

        type TaskService struct {
            db *storage.Postgres
        }

        func (s *TaskService) Rename(title string) string {
            return title
        }
        """
        assert _arch(source, path="internal/service/task.go") == [
            "services should depend on storage interfaces",
            "services should not expose storage implementation details",
            "service layer should contain business logic",
        ]

    def test_service_on_store_interface(self) -> None:
        """A *Store dependency and a branching method are clean."""
        source = """
        package service

        import "example.com/todo/internal/storage"

        type TaskService struct {
            store storage.TaskStore
        }

        func (s *TaskService) Rename(title string) error {
            if title == "" {
                return ErrEmptyTitle
            }
            return nil
        }
        """
        assert _arch(source, path="internal/service/task.go") == []


def test_api_types_embedding_storage() -> None:
    """Storage fields in an API struct are reported at each field, pointer or embedded."""
    source = """
    package api

    import "example.com/todo/internal/storage"

    type TaskResponse struct {
        Title string
        row   *storage.Row
        storage.Meta
    }
    """
    findings = findings_of(run_rules(source, "archcheck", path="internal/api/dto.go"), "archcheck")
    assert [d.message for d in findings] == [
        "api layer cannot depend on storage layer",
        "api types should not embed storage types",
        "api types should not embed storage types",
    ]
    content = go_source(source)
    assert findings[1].offset == content.index(b"row")
    assert findings[2].offset == content.index(b"storage.Meta")


def test_api_functions_need_their_own_dtos() -> None:
    """net/http's Request does not count as a DTO; a *Request type of the package does."""
    source = """
    package api

    import "net/http"

    type CreateTaskRequest struct {
        Title string
    }

    func Create(req CreateTaskRequest) {}

    func Health(w http.ResponseWriter, r *http.Request) {}
    """
    findings = findings_of(run_rules(source, "archcheck", path="internal/api/routes.go"), "archcheck")
    assert [d.message for d in findings] == [DTO_MESSAGE]
    assert findings[0].offset == go_source(source).index(b"func Health")
