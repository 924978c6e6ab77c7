from setuptools import setup, find_packages

setup(
    name='liberdus-sdk',
    version='0.1.0',
    description='Python SDK for Liberdus - gateway discovery, transaction signing and confirmation',
    author='Liberdus Team',
    packages=find_packages(exclude=['tests', 'tests.*', 'examples']),
    install_requires=[
        'httpx>=0.25.0',
        'pynacl>=1.5.0',
        'eth-account>=0.13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    python_requires='>=3.11',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
