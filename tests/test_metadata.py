import pytest
from pathlib import Path

from photo_manifest.exceptions import MetadataError
from photo_manifest.metadata.sidecar import MetadataResolver, normalize_list, normalize_text
from photo_manifest.models import Metadata, SourceImage


def _image(photos_dir: Path, rel: str) -> SourceImage:
    return SourceImage(absolute_path=photos_dir / rel, relative_path=rel)


def test_no_sidecar_gives_empty_record(tmp_path):
    meta = MetadataResolver().resolve(_image(tmp_path, "lonely.jpg"))
    assert meta == Metadata()


def test_reads_and_normalizes_fields(tmp_path):
    (tmp_path / "sunset.yml").write_text(
        "title: '  Golden Hour '\n"
        "date: 2024-05-01\n"
        "slug: golden\n"
        "categories: portrait\n"
        "tags: [golden, ' hour ', '']\n"
        "location: Lisbon\n"
        "description: Warm light.\n"
        "camera: ignored\n",
        encoding="utf-8",
    )

    meta = MetadataResolver().resolve(_image(tmp_path, "sunset.jpg"))

    assert meta.title == "Golden Hour"
    assert meta.date == "2024-05-01"
    assert meta.slug == "golden"
    assert meta.categories == ["portrait"]
    assert meta.tags == ["golden", "hour"]
    assert meta.location == "Lisbon"
    assert meta.description == "Warm light."


def test_yml_wins_over_yaml(tmp_path):
    (tmp_path / "pic.yml").write_text("title: from yml\n")
    (tmp_path / "pic.yaml").write_text("title: from yaml\n")

    resolver = MetadataResolver()
    assert resolver.find(tmp_path / "pic") == tmp_path / "pic.yml"
    assert resolver.resolve(_image(tmp_path, "pic.JPG")).title == "from yml"


def test_yaml_extension_is_used_when_alone(tmp_path):
    (tmp_path / "pic.yaml").write_text("title: from yaml\n")
    assert MetadataResolver().resolve(_image(tmp_path, "pic.jpeg")).title == "from yaml"


def test_sidecar_next_to_nested_image(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "b" / "x.yml").write_text("tags: one\n")
    assert MetadataResolver().resolve(_image(tmp_path, "a/b/x.jpg")).tags == ["one"]


@pytest.mark.parametrize("content", ["", "# only a comment\n", "~\n"])
def test_empty_sidecar_is_empty_record(tmp_path, content):
    (tmp_path / "pic.yml").write_text(content)
    assert MetadataResolver().resolve(_image(tmp_path, "pic.jpg")) == Metadata()


def test_non_mapping_sidecar_is_an_error(tmp_path):
    (tmp_path / "pic.yml").write_text("- just\n- a list\n")
    with pytest.raises(MetadataError):
        MetadataResolver().resolve(_image(tmp_path, "pic.jpg"))


def test_invalid_yaml_is_an_error(tmp_path):
    (tmp_path / "pic.yml").write_text("title: [unclosed\n")
    with pytest.raises(MetadataError, match="pic.yml"):
        MetadataResolver().resolve(_image(tmp_path, "pic.jpg"))


@pytest.mark.parametrize("value,expected", [
    (None, []),
    ("portrait", ["portrait"]),
    ("  ", []),
    (2024, ["2024"]),
    (["a", " b ", "", None, 3], ["a", "b", "3"]),
])
def test_normalize_list(value, expected):
    assert normalize_list(value) == expected


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ("  x ", "x"),
    ("   ", None),
    (42, "42"),
])
def test_normalize_text(value, expected):
    assert normalize_text(value) == expected


def test_non_utf8_sidecar_is_an_error(tmp_path):
    (tmp_path / "pic.yml").write_bytes("title: Café\n".encode("latin-1"))
    with pytest.raises(MetadataError, match="pic.yml"):
        MetadataResolver().resolve(_image(tmp_path, "pic.jpg"))
