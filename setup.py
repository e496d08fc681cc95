#!/usr/bin/env python3
from setuptools import setup
import subprocess
import os


def version():
    if os.environ.get("PKGVER"):
        return os.environ["PKGVER"]
    try:
        ver = subprocess.run(['git', 'describe', '--tags'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL).stdout.decode().strip()
    except OSError:
        ver = ''
    return ver or '0.1.0'


reqs = []
with open('requirements.txt') as f:
    for l in f:
        l = l.strip()
        if not l or l.startswith('#'):
            continue
        if l.find("://") != -1 and l.find("=") != -1:
            s = l.split("=", 1)
            reqs.append("{} @ {}".format(s[1], s[0]))
        else:
            reqs.append(l)

setup(
    name = 'songvault',
    packages = [
        'songvault',
        'songvault.types',
        ],
    version = version(),
    description = 'Song catalog ingestion service',
    install_requires = reqs,
    extras_require = {
        'test': ['pytest'],
    },
    license = 'MIT',
)
