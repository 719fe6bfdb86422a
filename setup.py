from setuptools import find_packages, setup


def main():
    version = "0.3.0"
    packages = find_packages(include=["btcchina", "btcchina.*"], )
    install_requires = [
        "aiohttp>=3.8.5,<3.14",
        "beautifulsoup4>=4.12.0",
        "pydantic>=2",
        "ujson>=5.7.0",
    ]
    extras_require = {
        "test": [
            "aioresponses>=0.7.4",
            "pytest>=7.4.0",
        ],
    }

    setup(name="btcchina",
          version=version,
          description="Python client for the BTC China trade and market data APIs",
          license="Apache 2.0",
          packages=packages,
          python_requires=">=3.8",
          install_requires=install_requires,
          extras_require=extras_require,
          )


if __name__ == "__main__":
    main()
