from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="marine-ops-dashboard",
    version="0.1.0",
    author="Marine Ops Team",
    description="Operations dashboard API for marine salvage, vessel overhaul and scrap land businesses",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Financial and Insurance Industry",
        "Topic :: Office/Business :: Financial :: Accounting",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
            "aiosqlite>=0.19",
        ],
    },
    entry_points={
        "console_scripts": [
            "marine-ops=marine_ops.api.main:main",
        ],
    },
    include_package_data=True,
    package_data={"marine_ops": ["migrations/script.py.mako"]},
)
