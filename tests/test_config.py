import pytest

from alpine_ami.config import (
    DEFAULT_APK_TOOLS_SHA256,
    DEFAULT_PACKAGES,
    AmiConfig,
    load_config,
    runlevel_map,
)
from alpine_ami.errors import ConfigError


def test_defaults():
    cfg = load_config(environ={})
    assert cfg == AmiConfig()
    assert cfg.alpine_release == "3.8"
    assert cfg.apk_tools_sha256 == DEFAULT_APK_TOOLS_SHA256
    assert cfg.packages == DEFAULT_PACKAGES
    assert cfg.target_root == "/mnt/target"
    assert list(runlevel_map(cfg)) == ["default", "sysinit", "boot", "shutdown"]


def test_environment_overrides_defaults():
    cfg = load_config(
        environ={
            "ALPINE_RELEASE": "3.9",
            "APK_TOOLS_URI": "https://mirror.test/apk.tar.gz",
            "APK_TOOLS_SHA256": "a" * 64,
        }
    )
    assert cfg.alpine_release == "3.9"
    assert cfg.apk_tools_url == "https://mirror.test/apk.tar.gz"
    assert cfg.apk_tools_sha256 == "a" * 64


def test_empty_environment_values_are_ignored():
    cfg = load_config(environ={"ALPINE_RELEASE": ""})
    assert cfg.alpine_release == "3.8"


def test_yaml_then_environment(tmp_path):
    p = tmp_path / "ami.yaml"
    p.write_text(
        "alpine_release: '3.7'\n"
        "username: ec2-user\n"
        "packages: [openssh, sudo]\n"
        "runlevels:\n"
        "  default: [sshd]\n"
    )
    cfg = load_config(str(p), environ={"ALPINE_RELEASE": "3.8"})
    assert cfg.alpine_release == "3.8"
    assert cfg.username == "ec2-user"
    assert cfg.packages == ("openssh", "sudo")
    assert runlevel_map(cfg) == {"default": ["sshd"]}


def test_config_is_immutable():
    cfg = load_config(environ={})
    with pytest.raises(Exception):
        cfg.username = "root"


@pytest.mark.parametrize(
    "text",
    [
        "- not\n- a mapping\n",
        "bogus_key: 1\n",
        "apk_tools_sha256: deadbeef\n",
        "packages: []\n",
    ],
)
def test_invalid_yaml_config(tmp_path, text):
    p = tmp_path / "bad.yaml"
    p.write_text(text)
    with pytest.raises(ConfigError):
        load_config(str(p), environ={})


def test_missing_or_non_yaml_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"), environ={})
    p = tmp_path / "ami.json"
    p.write_text("{}")
    with pytest.raises(ConfigError):
        load_config(str(p), environ={})


def test_as_dict_is_plain_data():
    d = AmiConfig().as_dict()
    assert d["packages"] == list(DEFAULT_PACKAGES)
    assert d["runlevels"]["shutdown"] == ["killprocs", "savecache", "mount-ro"]


@pytest.mark.parametrize(
    "key",
    ["username", "target_root", "fs_label", "mirror", "alpine_release", "ntp_server", "resolv_conf", "packages"],
)
def test_yaml_null_values_are_rejected(tmp_path, key):
    p = tmp_path / "ami.yaml"
    p.write_text(f"{key}: ~\n")
    with pytest.raises(ConfigError, match=key):
        load_config(str(p), environ={})


def test_empty_yaml_values_do_not_become_strings(tmp_path):
    p = tmp_path / "ami.yaml"
    p.write_text("username:\ntarget_root: ~\n")
    with pytest.raises(ConfigError):
        load_config(str(p), environ={})


def test_malformed_yaml_is_config_error(tmp_path):
    p = tmp_path / "ami.yaml"
    p.write_text("packages: [openssh\n")
    with pytest.raises(ConfigError, match="ami.yaml"):
        load_config(str(p), environ={})


def test_uppercase_checksums_are_accepted():
    cfg = load_config(environ={"APK_TOOLS_SHA256": DEFAULT_APK_TOOLS_SHA256.upper()})
    assert cfg.apk_tools_sha256 == DEFAULT_APK_TOOLS_SHA256
