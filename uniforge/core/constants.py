ROOT_PACKAGE_NAME = "uniforge"
