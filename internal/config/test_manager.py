"""
Tests for the Configuration Manager.

This module tests configuration loading, merging, environment variable
substitution and Nominatim-specific getters of the ConfigManager class.
"""

import tempfile
from pathlib import Path

import pytest

from internal.config.manager import ConfigManager, substituteEnvVars
from lib.nominatim import DEFAULT_BASE_URL, IdentificationKind, InvalidHeaderValueError

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sampleConfigToml():
    """Provide sample valid TOML configuration."""
    return """
[nominatim]
user-agent = "Example Application Name"
base-url = "http://localhost:8080/"
timeout = 2.5

[logging]
level = "DEBUG"
console = true
"""


@pytest.fixture
def overrideToml():
    """Provide override configuration TOML."""
    return """
[nominatim]
timeout = 30

[logging]
level = "WARNING"
"""


@pytest.fixture
def invalidSyntaxToml():
    """Provide invalid TOML syntax."""
    return """
[nominatim
user-agent = "missing_bracket"
"""


# ============================================================================
# Helper Functions
# ============================================================================


def createConfigFile(directory: Path, filename: str, content: str) -> Path:
    """Create a TOML config file in the specified directory."""
    filePath = directory / filename
    filePath.parent.mkdir(parents=True, exist_ok=True)
    filePath.write_text(content)
    return filePath


def createManager(tempDir: Path, content: str) -> ConfigManager:
    configPath = createConfigFile(tempDir, "nominatim.toml", content)
    return ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"))


# ============================================================================
# Loading Tests
# ============================================================================


class TestConfigLoading:
    """Test configuration loading and merging."""

    def testLoadConfigFile(self, tempDir, sampleConfigToml):
        """Test loading single configuration file."""
        manager = createManager(tempDir, sampleConfigToml)

        assert manager.get("nominatim")["user-agent"] == "Example Application Name"
        assert manager.getLoggingConfig() == {"level": "DEBUG", "console": True}

    def testMissingConfigRequired(self, tempDir):
        """Test missing config file exits if config is required, dood!"""
        with pytest.raises(SystemExit) as excInfo:
            ConfigManager(str(tempDir / "missing.toml"), dotEnvFile=str(tempDir / ".env"))

        assert excInfo.value.code == 1

    def testMissingConfigOptional(self, tempDir):
        """Test missing optional config file gives defaults."""
        manager = ConfigManager(str(tempDir / "missing.toml"), dotEnvFile=str(tempDir / ".env"), required=False)

        assert manager.config == {}
        assert manager.getBaseUrl() == DEFAULT_BASE_URL
        assert manager.getTimeout() == 10.0

    def testInvalidTomlSyntax(self, tempDir, invalidSyntaxToml):
        """Test invalid main config file exits."""
        with pytest.raises(SystemExit):
            createManager(tempDir, invalidSyntaxToml)

    def testMergeConfigDirs(self, tempDir, sampleConfigToml, overrideToml):
        """Test config directory files override main config recursively, dood!"""
        configPath = createConfigFile(tempDir, "nominatim.toml", sampleConfigToml)
        createConfigFile(tempDir, "conf.d/10-override.toml", overrideToml)
        createConfigFile(tempDir, "conf.d/nested/20-referer.toml", '[nominatim]\nreferer = "https://example.com/"\n')

        manager = ConfigManager(
            str(configPath), configDirs=[str(tempDir / "conf.d")], dotEnvFile=str(tempDir / ".env")
        )

        assert manager.getTimeout() == 30.0
        assert manager.getBaseUrl() == "http://localhost:8080/"
        assert manager.getNominatimConfig()["referer"] == "https://example.com/"
        assert manager.getLoggingConfig() == {"level": "WARNING", "console": True}

    def testConfigDirsOnly(self, tempDir, sampleConfigToml):
        """Test config directories can be used without main config file."""
        createConfigFile(tempDir, "conf.d/main.toml", sampleConfigToml)

        manager = ConfigManager(
            str(tempDir / "missing.toml"), configDirs=[str(tempDir / "conf.d")], dotEnvFile=str(tempDir / ".env")
        )

        assert manager.getTimeout() == 2.5

    def testBrokenFileInConfigDirSkipped(self, tempDir, sampleConfigToml, invalidSyntaxToml):
        """Test broken files in config directories are skipped."""
        configPath = createConfigFile(tempDir, "nominatim.toml", sampleConfigToml)
        createConfigFile(tempDir, "conf.d/broken.toml", invalidSyntaxToml)

        manager = ConfigManager(
            str(configPath),
            configDirs=[str(tempDir / "conf.d"), str(tempDir / "nonexistent")],
            dotEnvFile=str(tempDir / ".env"),
        )

        assert manager.getTimeout() == 2.5


# ============================================================================
# Environment Substitution Tests
# ============================================================================


class TestEnvSubstitution:
    """Test ${VAR} substitution."""

    def testSubstituteEnvVars(self, monkeypatch):
        """Test substitution in nested structures, dood!"""
        monkeypatch.setenv("TEST_NOMINATIM_HOST", "localhost")
        monkeypatch.delenv("TEST_NOMINATIM_UNSET", raising=False)

        result = substituteEnvVars(
            {
                "url": "http://${TEST_NOMINATIM_HOST}/",
                "list": ["${TEST_NOMINATIM_HOST}", 1],
                "unset": "${TEST_NOMINATIM_UNSET}",
                "number": 5,
            }
        )

        assert result == {
            "url": "http://localhost/",
            "list": ["localhost", 1],
            "unset": "${TEST_NOMINATIM_UNSET}",
            "number": 5,
        }

    def testDotEnvUsedForSubstitution(self, tempDir, monkeypatch):
        """Test values from dotenv file are substituted."""
        monkeypatch.setenv("TEST_NOMINATIM_AGENT", "placeholder")
        monkeypatch.delenv("TEST_NOMINATIM_AGENT")
        (tempDir / ".env").write_text("TEST_NOMINATIM_AGENT=Agent From Dotenv\n")
        configPath = createConfigFile(tempDir, "nominatim.toml", '[nominatim]\nuser-agent = "${TEST_NOMINATIM_AGENT}"\n')

        manager = ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"))

        assert manager.getIdentificationMethod().headerValue() == "Agent From Dotenv"


# ============================================================================
# Getter Tests
# ============================================================================


class TestGetterMethods:
    """Test Nominatim-specific getters."""

    def testGetters(self, tempDir, sampleConfigToml):
        """Test base URL and timeout getters."""
        manager = createManager(tempDir, sampleConfigToml)

        assert manager.getBaseUrl() == "http://localhost:8080/"
        assert manager.getTimeout() == 2.5

    def testInvalidTimeout(self, tempDir):
        """Test non-numeric timeout exits, dood!"""
        manager = createManager(tempDir, '[nominatim]\ntimeout = "soon"\n')

        with pytest.raises(SystemExit) as excInfo:
            manager.getTimeout()

        assert excInfo.value.code == 1

    def testUserAgentIdentification(self, tempDir, sampleConfigToml):
        """Test user-agent identification, dood!"""
        ident = createManager(tempDir, sampleConfigToml).getIdentificationMethod()

        assert ident.kind == IdentificationKind.USER_AGENT
        assert ident.headerValue() == "Example Application Name"

    def testRefererIdentification(self, tempDir):
        """Test referer identification."""
        manager = createManager(tempDir, '[nominatim]\nreferer = "https://example.com/"\n')

        ident = manager.getIdentificationMethod()

        assert ident.toHeader() == ("Referer", "https://example.com/")

    def testUserAgentWinsOverReferer(self, tempDir):
        """Test user-agent is preferred if both are set."""
        manager = createManager(tempDir, '[nominatim]\nreferer = "https://example.com/"\nuser-agent = "app"\n')

        assert manager.getIdentificationMethod().kind == IdentificationKind.USER_AGENT

    def testMissingIdentification(self, tempDir):
        """Test missing identification exits, dood!"""
        manager = createManager(tempDir, '[nominatim]\ntimeout = 5\n')

        with pytest.raises(SystemExit):
            manager.getIdentificationMethod()

    def testInvalidIdentification(self, tempDir):
        """Test invalid identification value is reported."""
        manager = createManager(tempDir, '[nominatim]\nuser-agent = "bad\\nvalue"\n')

        with pytest.raises(InvalidHeaderValueError):
            manager.getIdentificationMethod()
