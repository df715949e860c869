import pytest

from tlddb.index import build_rule_index

SAMPLE_LIST = """\
// This Source Code Form is subject to the terms of the Mozilla Public
// License, v. 2.0.

// ===BEGIN ICANN DOMAINS===

// com
com

// uk
uk
co.uk
ac.uk

// ck
*.ck
!www.ck

// jp
jp
*.kawasaki.jp
!city.kawasaki.jp

// biz
biz

// ===END ICANN DOMAINS===
// ===BEGIN PRIVATE DOMAINS===

// GitHub
github.io

// Blogger
blogspot.com

// ===END PRIVATE DOMAINS===
"""


@pytest.fixture
def sample_lines():
    return SAMPLE_LIST.splitlines()


@pytest.fixture
def index(sample_lines):
    return build_rule_index(sample_lines)
