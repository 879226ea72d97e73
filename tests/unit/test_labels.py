"""Unit tests for provenance labels."""

from kdm.common.models.labels import Labels

RKE_STORE = Labels.RKE_STORE_LABEL


class TestProvenance:
    def test_for_vendor(self):
        assert Labels.for_provenance(True).as_dict() == {RKE_STORE: "false"}
        assert Labels.for_provenance(False).as_dict() == {}

    def test_matches(self):
        vendor = Labels({RKE_STORE: "false", "team": "platform"})
        custom = Labels({"team": "platform"})
        assert vendor.provenance_matches(True)
        assert not vendor.provenance_matches(False)
        assert custom.provenance_matches(False)
        assert not custom.provenance_matches(True)

    def test_unexpected_value_is_not_vendor(self):
        labels = Labels({RKE_STORE: "true"})
        assert not labels.provenance_matches(True)
        assert not labels.provenance_matches(False)

    def test_with_vendor_provenance_returns_copy(self):
        labels = Labels({"team": "platform"})
        vendor = labels.with_vendor_provenance(True)
        assert vendor.as_dict() == {"team": "platform", RKE_STORE: "false"}
        assert labels.as_dict() == {"team": "platform"}
        assert vendor.with_vendor_provenance(False) == labels
