from setuptools import setup, find_packages

setup(
    name='tritoncloud',

    version='0.1.0',

    description='A Triton (Joyent CloudAPI) cloud provider for node orchestrators',

    license='Apache License (2.0)',

    classifiers=[
        'Development Status :: 3 - Alpha',

        'Topic :: Software Development :: Libraries',
        'Topic :: System :: Distributed Computing',

        'Intended Audience :: Developers',

        'License :: OSI Approved :: Apache Software License',

        'Programming Language :: Python :: 3',
    ],

    keywords='triton joyent cloudapi cloud provider instances',

    packages=find_packages(),

    python_requires='>=3.7',

    install_requires=[
        'google-api-python-client>=2.0.0',
        'httplib2>=0.19.0',
        'paramiko>=2.9.0',
    ],

    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },

    test_suite='tritoncloud'

)
