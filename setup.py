import setuptools

# Howto
#
# Build and upload to pypi:
#
#python3 -m venv /tmp/venv
#source /tmp/venv/bin/activate
#pip install build
#pip install twine
#python3 -m build
#python3 -m twine upload dist/ppsh-0.1.0.tar.gz
#
# Run the tests:
#
#pip install -e .[test]
#pytest test

#Genrate long description using readme file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="ppsh",
    version="0.1.0",
    author="Karl Laundal",
    author_email="readme@file.md",
    description="Pure Python spherical harmonic models with exact gradients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
    ],
    install_requires=[
        'numpy>=1.17',
        'pandas>=1.3.5'
    ],
    extras_require={
        'test': ['pytest'],
    },
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    python_requires=">=3.7",
)
