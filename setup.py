"""
libotp setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re
from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# pull version string from libotp, without importing it
# (runtime dependencies may not be installed yet)
with open(os.path.join(root_dir, "libotp", "__init__.py")) as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "time-based one-time passwords on a pure-python SHA-1 / HMAC-SHA1 core"

DESCRIPTION = """\
libotp computes RFC 6238 TOTP tokens from a shared secret and a unix timestamp.
The SHA-1 hash, HMAC-SHA1 construction and RFC 4648 base32 decoder it relies on
are implemented in pure python, without hashlib or hmac.
"""

KEYWORDS = """\
totp hotp 2fa otp
sha1 hmac base32
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["libotp", "libotp.*"]),
    zip_safe=True,
    python_requires=">=3.9",

    # metadata
    name="libotp",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    install_requires=[
        "typing_extensions>=4.6",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-archon",
        ],
    },
)

#=============================================================================
# eof
#=============================================================================
