import pytest

from lambda_archiver.config import PackageConfig
from lambda_archiver.errors import ConfigError


def test_package_config_parsing(tmp_path):
    config_content = """
    name: vapor-app
    environments:
      production:
        runtime: php-8.3:al2
      staging:
        runtime: docker
    exclude: ["tests", "*.md"]
    permissions:
      artisan: "0755"
      bin/php: 33133
    archive:
      tool_timeout: 120
      deterministic: true
    """
    config_path = tmp_path / "archiver.yml"
    config_path.write_text(config_content)

    config = PackageConfig.from_yaml(config_path)

    assert config.name == "vapor-app"
    assert not config.environment("production").uses_container_image
    assert config.environment("staging").uses_container_image
    assert config.exclude == ["tests", "*.md"]
    assert config.permissions == {"artisan": 0o755, "bin/php": 33133}
    assert config.archive.tool_timeout == 120
    assert config.archive.deterministic is True


def test_config_defaults(tmp_path):
    config_path = tmp_path / "archiver.yml"
    config_path.write_text("environments:\n  production: {}\n")

    config = PackageConfig.from_yaml(config_path)

    assert config.environment("production").runtime == "php-8.3:al2"
    assert config.exclude == []
    assert config.archive.tool_timeout is None
    assert config.archive.deterministic is False


def test_config_docker_arm_uses_container_image():
    config = PackageConfig.model_validate(
        {"environments": {"production": {"runtime": "docker-arm"}}}
    )
    assert config.environment("production").uses_container_image


def test_config_unknown_environment():
    with pytest.raises(ConfigError, match="'qa' is not defined"):
        PackageConfig().environment("qa")


def test_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Config file not found"):
        PackageConfig.from_yaml(tmp_path / "missing.yml")


def test_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "archiver.yml"
    config_path.write_text("environments: [unclosed")

    with pytest.raises(ConfigError, match="Error parsing YAML"):
        PackageConfig.from_yaml(config_path)


@pytest.mark.parametrize("mode", ["rwx", "0o999", 0x10000])
def test_config_invalid_permission_mode(tmp_path, mode):
    config_path = tmp_path / "archiver.yml"
    config_path.write_text(f"permissions:\n  artisan: {mode!r}\n")

    with pytest.raises(ConfigError):
        PackageConfig.from_yaml(config_path)
