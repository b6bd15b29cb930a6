import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="ethereum-refund-extensions",
    version="0.1.0",
    description=(
        "Reference implementation of refundable fungible, non-fungible and "
        "multi-token contracts"
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="CC0-1.0",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(
        where="src",
        include=["ethereum_refunds*", "ethereum_refunds_tools*"],
    ),
    python_requires=">=3.10",
    install_requires=[
        "ethereum-types>=0.2.1",
        "ethereum-rlp>=0.1.1",
        "pycryptodome>=3",
        "eth-abi>=5",
        "eth-utils>=4",
        "pydantic>=2.5,<3",
    ],
    extras_require={
        "test": [
            "pytest>=8",
        ],
    },
    entry_points={
        "console_scripts": [
            "refund-scenario=ethereum_refunds_tools:main",
        ],
    },
)
