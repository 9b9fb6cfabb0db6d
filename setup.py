from setuptools import setup, find_namespace_packages

# Read requirements.txt
with open('requirements.txt') as f:
    requirements = [
        line.strip()
        for line in f
        if line.strip() and not line.startswith('#')
    ]

setup(
    name="refwatch",
    version="0.1.0",
    packages=find_namespace_packages(where="src", include=["refwatch*"]),
    package_dir={"": "src"},
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-mock",
            "httpx",
        ],
    },
    python_requires=">=3.10",
)
