"""Integration test for on-disk registry layout."""

from __future__ import annotations

import json

from pkgstore import PackageBuilder, PackageReq, RegistryStore, capture
from registry.manifest_payload import encode_manifest_line
from snapshot.directory_snapshot import to_plain


def test_published_registry_matches_expected_layout(tmp_path) -> None:
    """Publishing should produce the documented index and contents tree."""
    store = RegistryStore(tmp_path)
    widgets_old = PackageBuilder("acme/widgets", "1.0.0")
    widgets_new = PackageBuilder("acme/widgets", "1.1.0").with_dep("Gadgets", "acme/gadgets@>=2")
    gadgets = PackageBuilder("acme/gadgets", "2.0.0")
    for builder in (widgets_old, widgets_new, gadgets):
        store.publish(builder.manifest(), builder.contents())
    (tmp_path / "index" / "config.json").write_text(
        json.dumps({"fallback_registries": []}), encoding="utf-8"
    )

    tree = to_plain(capture(tmp_path))

    widgets_index = "".join(
        encode_manifest_line(builder.manifest()).decode("utf-8") + "\n"
        for builder in (widgets_old, widgets_new)
    )
    assert tree == {
        "contents": {
            "acme": {
                "gadgets": {"2.0.0.zip": "acme/gadgets@2.0.0"},
                "widgets": {
                    "1.0.0.zip": "acme/widgets@1.0.0",
                    "1.1.0.zip": "acme/widgets@1.1.0",
                },
            }
        },
        "index": {
            "acme": {
                "gadgets": encode_manifest_line(gadgets.manifest()).decode("utf-8") + "\n",
                "widgets": widgets_index,
            },
            "config.json": '{"fallback_registries": []}',
        },
    }
    assert len(store.query(PackageReq.parse("acme/widgets@>=1.1"))) == 1
