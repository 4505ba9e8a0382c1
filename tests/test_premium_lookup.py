import json
import os
import tempfile
import unittest

from infrastructure.files.premium_lookup_json import JsonPremiumLookup, NoPremiumLookup


class JsonPremiumLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump({"usernames": ["alice", "@bob"]}, fh)

    def tearDown(self) -> None:
        os.remove(self.path)

    def test_listed_usernames_are_premium(self):
        lookup = JsonPremiumLookup(self.path)
        self.assertTrue(lookup.is_premium("alice"))
        self.assertTrue(lookup.is_premium("bob"))
        self.assertFalse(lookup.is_premium("carol"))

    def test_missing_username_is_not_premium(self):
        lookup = JsonPremiumLookup(self.path)
        self.assertFalse(lookup.is_premium(None))
        self.assertFalse(lookup.is_premium(""))

    def test_file_is_read_once(self):
        lookup = JsonPremiumLookup(self.path)
        self.assertTrue(lookup.is_premium("alice"))
        os.remove(self.path)
        self.assertTrue(lookup.is_premium("alice"))
        # Recreate so tearDown can remove it.
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write("{}")

    def test_no_premium_lookup(self):
        self.assertFalse(NoPremiumLookup().is_premium("alice"))


if __name__ == "__main__":
    unittest.main()
