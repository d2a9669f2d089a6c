from setuptools import setup, find_packages

setup(
    name="wasmbench",
    version="0.1.0",
    description="Load, invoke and benchmark compiled WebAssembly modules",
    author="Jay Chawrey",
    package_dir={"": "python"},
    packages=find_packages(where="python", exclude=["examples"]),
    package_data={
        "wasmbench": ["modules/*.wasm", "modules/*.wat"],
    },
    install_requires=[
        "numpy>=1.20.0",
        "wasmtime>=14.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "wasmbench=wasmbench.benchmark:main",
        ],
    },
    python_requires=">=3.9",
)
