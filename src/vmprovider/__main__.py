from vmprovider.cli import main

raise SystemExit(main())
