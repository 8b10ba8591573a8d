"""Shared fixtures: sample headers and a small mirrored tree."""

from __future__ import annotations

from pathlib import Path

import pytest

LABELED_RFC = """\
Title: Key words for use in RFCs to Indicate Requirement Levels
Author: S. Bradner
Date: March 1997

Abstract

   In many standards track documents several words are used to signify
   the requirements in the specification.

1. MUST
"""

CLASSIC_RFC = """\


Network Working Group                                         S. Bradner
Request for Comments: 2119                            Harvard University
BCP: 14                                                       March 1997
Category: Best Current Practice


        Key words for use in RFCs to Indicate Requirement Levels

Status of this Memo

   This document specifies an Internet Best Current Practices for the
   Internet Community, and requests discussion and suggestions for
   improvements.
"""

MODERN_RFC = """\




Internet Engineering Task Force (IETF)                  R. Fielding, Ed.
Request for Comments: 9110                                         Adobe
STD: 97                                               M. Nottingham, Ed.
Obsoletes: 2818, 7230, 7231, 7232, 7233, 7235,                    Fastly
           7538, 7615, 7694                              J. Reschke, Ed.
Updates: 3864                                                 greenbytes
Category: Standards Track                                      June 2022
ISSN: 2070-1721


                             HTTP Semantics

Abstract

   The Hypertext Transfer Protocol (HTTP) is a stateless application-
   level protocol for distributed, collaborative, hypertext information
   systems.

Status of This Memo

   This is an Internet Standards Track document.
"""

CLASSIC_DRAFT = """\



Network Working Group                                           J. Smith
Internet-Draft                                              Example Inc.
Intended status: Standards Track                            4 March 2021
Expires: 5 September 2021


                           The Foo Protocol
                        draft-ietf-foo-bar-03

Abstract

   This document describes the Foo protocol.

Status of This Memo

   This Internet-Draft is submitted in full conformance.
"""

HTML_RFC = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <title>RFC 6468 - Sieve Notification Mechanism: SIP MESSAGE</title>
  <meta name="DC.Identifier" content="urn:ietf:rfc:6468">
  <meta name="DC.Title" content="Sieve Notification Mechanism: SIP MESSAGE">
  <meta name="DC.Creator" content="Melnikov, Alexey">
  <meta name="DC.Creator" content="Leiba, Barry">
  <meta name="DC.Date.Issued" content="February, 2012">
  <meta name="DC.Relation.Replaces" content="draft-ietf-sieve-notify-sip-message">
  <meta name="DC.Description.Abstract" content="This document describes a profile
of the Sieve extension for notifications.">
</head>
<body>
"""


@pytest.fixture
def mirror(tmp_path: Path) -> Path:
    """A mirrored tree with one document of every supported shape."""
    root = tmp_path / "mirror"
    rfc = root / "rfc"
    drafts = root / "drafts"
    rfc.mkdir(parents=True)
    drafts.mkdir()

    (rfc / "rfc2119.txt").write_text(LABELED_RFC)
    (rfc / "rfc0000.txt").write_text("")
    (rfc / "rfc9110.txt").write_text(MODERN_RFC)
    (rfc / "rfc6468.html").write_text(HTML_RFC)
    (drafts / "draft-ietf-foo-bar-02.txt").write_text(CLASSIC_DRAFT.replace("-03", "-02"))
    (drafts / "draft-ietf-foo-bar-03.txt").write_text(CLASSIC_DRAFT)
    (root / "README").write_text("Local IETF mirror\nRefreshed 12 May 2023\n")
    (root / ".rsync-state").write_text("hidden")
    return root
