"""Extração do link de vídeo TikTok a partir de texto livre."""

from __future__ import annotations

import re

from tiktok_relay.domain.errors import NoLinkFoundError

# Domínio padrão ou subdomínio de link curto (vt.), seguido de caminho seguro
TIKTOK_URL_PATTERN = re.compile(r"https?://(?:www\.|vt\.)?tiktok\.com/[a-zA-Z0-9/_?=&%-]+")


def find_video_link(content: str) -> str | None:
    """Retorna o primeiro link reconhecido ou None."""
    match = TIKTOK_URL_PATTERN.search(content)
    return match.group(0) if match else None


def extract(content: str) -> str:
    """Retorna o primeiro link TikTok do conteúdo; os demais são ignorados.

    Raises:
        NoLinkFoundError: Se nenhum link reconhecido estiver presente
    """
    link = find_video_link(content)
    if link is None:
        raise NoLinkFoundError("no valid TikTok URL found in content")
    return link
