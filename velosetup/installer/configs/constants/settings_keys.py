#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Settings key constants for the Velociraptor installer
"""

# Deployment options
KEY_SETTING_DEPLOYMENT_TIER = "deployment.tier"
KEY_SETTING_INSTALL_AS_SERVICE = "deployment.install_as_service"
KEY_SETTING_INSTALL_DIR = "deployment.install_dir"
KEY_SETTING_DATASTORE_DIR = "deployment.datastore_dir"

# Security posture
KEY_SETTING_SECURITY_LEVEL = "security.level"
KEY_SETTING_COMPLIANCE_FRAMEWORK = "security.compliance"

# Certificates
KEY_SETTING_CERTIFICATE_STRATEGY = "certificate.strategy"
KEY_SETTING_ACME_EMAIL = "certificate.acme_email"
KEY_SETTING_CUSTOM_CERT_PATH = "certificate.custom_cert_path"
KEY_SETTING_CUSTOM_KEY_PATH = "certificate.custom_key_path"

# Network
KEY_SETTING_BIND_ADDRESS = "network.bind_address"
KEY_SETTING_PORT = "network.port"
KEY_SETTING_DNS_NAME = "network.dns_name"
KEY_SETTING_PROXY_ENABLED = "network.proxy_enabled"
KEY_SETTING_PROXY_HOST = "network.proxy_host"
KEY_SETTING_PROXY_PORT = "network.proxy_port"

# Single sign-on
KEY_SETTING_SSO_PROVIDER = "sso.provider"
KEY_SETTING_SSO_ENDPOINT = "sso.endpoint"
KEY_SETTING_SSO_CLIENT_ID = "sso.client_id"
KEY_SETTING_SSO_CLIENT_SECRET = "sso.client_secret"
KEY_SETTING_SSO_DOMAIN = "sso.domain"

# Artifact packs
KEY_SETTING_ARTIFACT_PACKS = "artifacts.packs"

# Administrator credentials
KEY_SETTING_ADMIN_USERNAME = "credentials.username"
KEY_SETTING_USE_CUSTOM_PASSWORD = "credentials.use_custom_password"
KEY_SETTING_CUSTOM_PASSWORD = "credentials.custom_password"
KEY_SETTING_GENERATED_PASSWORD = "credentials.generated_password"
