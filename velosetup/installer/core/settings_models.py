#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Typed views over grouped settings.

Each mutually-exclusive choice is modelled as a small family of frozen
dataclasses; a variant carries only the fields relevant to it, so code that
consumes a certificate or SSO choice dispatches on the variant type rather than
on a flat bag of optional strings.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from velosetup.velo_constants import CertificateStrategy, SSOProvider


@dataclass(frozen=True)
class ProxySettings:
    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


@dataclass(frozen=True)
class NetworkSettings:
    bind_address: str
    port: int
    dns_name: str
    proxy: Optional[ProxySettings] = None


###################################################################################################
# certificate variants
@dataclass(frozen=True)
class SelfSignedCertificate:
    strategy = CertificateStrategy.SELF_SIGNED


@dataclass(frozen=True)
class ManagedAcmeCertificate:
    email: str
    domain: str
    strategy = CertificateStrategy.MANAGED_ACME


@dataclass(frozen=True)
class CustomImportCertificate:
    cert_path: str
    key_path: str
    strategy = CertificateStrategy.CUSTOM_IMPORT


CertificateSettings = Union[SelfSignedCertificate, ManagedAcmeCertificate, CustomImportCertificate]


###################################################################################################
# SSO variants
@dataclass(frozen=True)
class NoSSO:
    provider = SSOProvider.NONE


@dataclass(frozen=True)
class SamlSSO:
    endpoint: str
    provider = SSOProvider.SAML


@dataclass(frozen=True)
class OAuthSSO:
    client_id: str
    client_secret: str = field(repr=False)
    provider = SSOProvider.OAUTH


@dataclass(frozen=True)
class ActiveDirectorySSO:
    domain: str
    provider = SSOProvider.ACTIVE_DIRECTORY


SSOSettings = Union[NoSSO, SamlSSO, OAuthSSO, ActiveDirectorySSO]


###################################################################################################
@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
    is_custom: bool

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='********', is_custom={self.is_custom})"
