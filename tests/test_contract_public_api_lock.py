from __future__ import annotations

import unittest


class TestPublicApiLockContract(unittest.TestCase):
    def test_api_module_exports_are_present(self) -> None:
        import lanegrid.api as api

        self.assertTrue(hasattr(api, "__all__"))
        self.assertIsInstance(api.__all__, (list, tuple))
        self.assertEqual(len(api.__all__), len(set(api.__all__)))
        self.assertEqual(list(api.__all__), sorted(api.__all__))

        for name in api.__all__:
            self.assertIsInstance(name, str)
            self.assertTrue(hasattr(api, name), f"lanegrid.api missing public name: {name}")
            self.assertIsNotNone(getattr(api, name), f"lanegrid.api {name} is None")

    def test_pipeline_stages_are_public(self) -> None:
        import lanegrid.api as api

        for name in ("normalize", "clip", "assign_lanes", "to_geometry", "build_view", "LayoutEngine"):
            self.assertIn(name, api.__all__)

    def test_package_reexports_match_api_all(self) -> None:
        import lanegrid
        import lanegrid.api as api

        self.assertEqual(sorted(lanegrid.__all__), sorted(api.__all__))
        for name in api.__all__:
            self.assertTrue(hasattr(lanegrid, name), f"lanegrid package does not re-export: {name}")
            self.assertIs(getattr(lanegrid, name), getattr(api, name), f"lanegrid.{name} must be same object as lanegrid.api.{name}")


if __name__ == "__main__":
    unittest.main(verbosity=2)
