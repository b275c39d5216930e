# -*- coding: utf-8 -*-

from setuptools import setup, find_packages


setup(
    name="oplplayer",
    version="0.1.0",
    description="Decoders for OPL register-write logs (IMF, RAW, DRO, VGM) and a buffer-driven playback engine",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tools"]),
    python_requires=">=3.8",
    install_requires=[
        "more-itertools",
        "numpy",
    ],
    extras_require={
        "test": ["parameterized", "pytest"],
    },
    entry_points={"console_scripts": []},
    scripts=["tools/oplDump.py"],
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: Developers",
        'License :: OSI Approved :: MIT License',
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
