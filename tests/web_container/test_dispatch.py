import os
import tempfile
import unittest
from pathlib import Path

from ui_context.config import UIContextConfig
from ui_context.lifecycle import start
from web_container.config import ContainerConfig
from web_container.service import WebContainer
from web_container.types import HttpResponse


def _ok(body: bytes):
    def _handler(request):
        return HttpResponse(200, "OK", {}, body + b":" + (request.path_info or "").encode())

    return _handler


class WebContainerDispatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.container = WebContainer(ContainerConfig(host="127.0.0.1", port=8080))

    def test_unmounted_path_is_container_not_found(self) -> None:
        response = self.container.dispatch("/anything")

        self.assertEqual(404, response.status)

    def test_longest_mount_wins_and_splits_path_info(self) -> None:
        self.container.register("/", _ok(b"root"))
        self.container.register("/admin", _ok(b"admin"))

        self.assertEqual(b"admin:/css/a.css", self.container.dispatch("/admin/css/a.css").body)
        self.assertEqual(b"root:", self.container.dispatch("/administrator").body)

    def test_mount_without_suffix_has_no_path_info(self) -> None:
        seen = []

        def _handler(request):
            seen.append(request)
            return HttpResponse(204, "No Content")

        self.container.register("admin/", _handler)
        self.container.dispatch("/admin?x=1")

        self.assertEqual("/admin", seen[0].servlet_path)
        self.assertIsNone(seen[0].path_info)

    def test_unhandled_request_falls_through_to_shorter_mount(self) -> None:
        self.container.register("/", _ok(b"console"))
        self.container.register("/system", lambda request: None)

        self.assertEqual(b"console:", self.container.dispatch("/system/console").body)

    def test_unregister_removes_mount(self) -> None:
        self.container.register("/admin", _ok(b"admin"))
        self.container.unregister("/admin")

        self.assertEqual((), self.container.mounts())
        self.assertEqual(404, self.container.dispatch("/admin/x").status)

    def test_percent_encoded_traversal_stays_inside_root(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir).resolve()
            default = base / "default"
            extension = base / "extension"
            default.mkdir()
            extension.mkdir()
            (default / "index.html").write_bytes(b"<html></html>")
            (base / "secret.txt").write_bytes(b"secret")
            start(
                self.container,
                UIContextConfig(
                    context_root="/",
                    default_dir=str(default),
                    extension_dir=str(extension),
                    allowed_dirs=(str(default), str(extension)),
                ),
            )

            traversal = self.container.dispatch("/%2e%2e/secret.txt")
            index = self.container.dispatch("/")
            console = self.container.dispatch("/system/console")

            self.assertEqual(404, traversal.status)
            self.assertEqual(b"<html></html>", index.body)
            self.assertEqual("no-cache", index.headers["Cache-Control"])
            # Not handled by the UI context, so the container answers.
            self.assertEqual(404, console.status)
            self.assertEqual(b"no handler for path\n", console.body)

    def test_conditional_header_reaches_the_handler(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir).resolve()
            (base / "app.js").write_bytes(b"1")
            os.utime(base / "app.js", (1_700_000_000, 1_700_000_000))
            start(
                self.container,
                UIContextConfig(
                    context_root="/ui",
                    default_dir=str(base),
                    extension_dir=str(base),
                    allowed_dirs=(str(base),),
                ),
            )

            response = self.container.dispatch(
                "/ui/app.js",
                {"If-Modified-Since": "Tue, 14 Nov 2023 22:13:20 GMT"},
            )

            self.assertEqual(304, response.status)
            self.assertEqual(302, self.container.dispatch("/ui").status)


if __name__ == "__main__":
    unittest.main()
