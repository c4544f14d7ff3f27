def load_all_models():
    import model.user                                    # noqa: F401
    import model.profiles.profile                        # noqa: F401
    import model.points                                  # noqa: F401
    import model.followers                               # noqa: F401
    import model.social.models                           # noqa: F401
    import model.media                                   # noqa: F401
