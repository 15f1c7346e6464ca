import pytest
from pydantic import ValidationError

from src.utils.config_loader import DEFAULT_CONFIG_PATH, apply_env_overrides, load_storefront_config


def test_bundled_config_loads():
    config = load_storefront_config(DEFAULT_CONFIG_PATH, environ={})

    assert config.catalog.placeholder_image.startswith("https://via.placeholder.com/")
    assert config.catalog.export_indent == 4
    assert config.auth.max_login_attempts == 5
    assert config.database_url is None


def test_missing_file_falls_back_to_defaults(tmp_path):
    config = load_storefront_config(tmp_path / "absent.yml", environ={})

    assert config.media_patch_attempts == 2
    assert config.static.products_file == "products.json"


def test_environment_overrides_yaml(tmp_path):
    path = tmp_path / "storefront.yml"
    path.write_text("blob:\n  timeout_seconds: 5\nauth:\n  passcode: from-yaml\n", encoding="utf-8")

    config = load_storefront_config(path, environ={
        "DATABASE_URL": "sqlite:///x.db",
        "BLOB_STORE_URL": "https://blobs.test",
        "ADMIN_PASSCODE": "from-env",
        "REDIS_URL": "",
    })

    assert config.database_url == "sqlite:///x.db"
    assert config.blob.base_url == "https://blobs.test"
    assert config.blob.timeout_seconds == 5
    assert config.auth.passcode == "from-env"
    assert config.redis_url is None


def test_apply_env_overrides_does_not_mutate_input():
    data = {"auth": {"passcode": "a"}}

    merged = apply_env_overrides(data, {"ADMIN_CREDENTIALS": "a@b.c:pw"})

    assert data == {"auth": {"passcode": "a"}}
    assert merged["auth"] == {"passcode": "a", "credentials": "a@b.c:pw"}


def test_invalid_config_raises(tmp_path):
    path = tmp_path / "storefront.yml"
    path.write_text("media_patch_attempts: 0\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_storefront_config(path, environ={})
