#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from enum import Enum


###################################################################################################
VELOSETUP_VERSION = "1.0.0"

###################################################################################################
PLATFORM_WINDOWS = "Windows"
PLATFORM_MAC = "Darwin"
PLATFORM_LINUX = "Linux"

###################################################################################################
# Velociraptor binary and release discovery
VELOCIRAPTOR_BINARY_NAME = "velociraptor"
VELOCIRAPTOR_RELEASE_API_URL = "https://api.github.com/repos/Velocidex/velociraptor/releases/latest"
VELOCIRAPTOR_RELEASE_USER_AGENT = "velosetup"
# release assets containing any of these are never installed
VELOCIRAPTOR_ASSET_EXCLUDES = ("debug", "collector")
# (platform.system(), normalized machine) -> substring of the matching release asset name
VELOCIRAPTOR_ASSET_PATTERNS = {
    (PLATFORM_LINUX, "amd64"): "linux-amd64",
    (PLATFORM_LINUX, "arm64"): "linux-arm64",
    (PLATFORM_MAC, "amd64"): "darwin-amd64",
    (PLATFORM_MAC, "arm64"): "darwin-arm64",
    (PLATFORM_WINDOWS, "amd64"): "windows-amd64",
}

###################################################################################################
# Layout under the install directory
VELOCIRAPTOR_BIN_DIR = "bin"
VELOCIRAPTOR_CONFIG_FILENAME = "server.config.yaml"
VELOCIRAPTOR_DATASTORE_DIR = "datastore"
VELOCIRAPTOR_LOGS_DIR = "logs"
VELOCIRAPTOR_PID_FILENAME = "velociraptor.pid"
VELOCIRAPTOR_PROCESS_LOG_FILENAME = "velociraptor.log"
VELOCIRAPTOR_POLICY_FILENAME = "deployment-policy.yaml"
VELOCIRAPTOR_AUTOCERT_CACHE_DIR = "acme"

DEFAULT_INSTALL_DIR_LINUX = "/opt/velociraptor"
DEFAULT_INSTALL_DIR_MAC = "~/Library/Application Support/Velociraptor"
DEFAULT_INSTALL_DIR_WINDOWS = "C:\\Program Files\\Velociraptor"

###################################################################################################
# Service registration
SERVICE_NAME = "velociraptor"
SYSTEMD_UNIT_DIR = "/etc/systemd/system"
LAUNCHD_LABEL = "com.velocidex.velociraptor"
LAUNCHD_AGENT_DIR = "~/Library/LaunchAgents"

###################################################################################################
# Network defaults
DEFAULT_BIND_ADDRESS = "0.0.0.0"
DEFAULT_GUI_PORT = 8889
DEFAULT_DNS_NAME = "localhost"
DEFAULT_PROXY_PORT = 3128
MIN_SERVICE_PORT = 1024
MAX_PORT = 65535

###################################################################################################
DEFAULT_ADMIN_USERNAME = "admin"
MIN_PASSWORD_LENGTH = 8
GENERATED_PASSWORD_LENGTH = 20
MIN_FREE_DISK_BYTES = 1024**3


###################################################################################################
# Mutually exclusive setting domains
class DeploymentTier(Enum):
    STANDALONE = "Standalone"
    SERVER = "Server"
    ENTERPRISE = "Enterprise"


class SecurityLevel(Enum):
    BASIC = "Basic"
    STANDARD = "Standard"
    MAXIMUM = "Maximum"


class ComplianceFramework(Enum):
    NONE = "None"
    SOX = "SOX"
    HIPAA = "HIPAA"
    PCI_DSS = "PCI-DSS"
    GDPR = "GDPR"


class CertificateStrategy(Enum):
    SELF_SIGNED = "SelfSigned"
    MANAGED_ACME = "ManagedACME"
    CUSTOM_IMPORT = "CustomImport"


class SSOProvider(Enum):
    NONE = "None"
    SAML = "SAML"
    OAUTH = "OAuth"
    ACTIVE_DIRECTORY = "ActiveDirectory"


class SettingsFileFormat(Enum):
    JSON = "json"
    YAML = "yaml"
