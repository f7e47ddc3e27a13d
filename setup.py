"""Setup script for spores, a Spotify playlist manager."""

from setuptools import setup, find_namespace_packages

setup(
    name="spores",
    version="0.1.0",
    description="Search Spotify and manage playlists from the command line",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.28.0",
        "requests-oauthlib>=1.3.0",
        "oauthlib>=3.2.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "spores=spores.cli:main",
        ]
    },
)
